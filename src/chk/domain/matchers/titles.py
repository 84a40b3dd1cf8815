"""Title matchers: label an expectation without recording an outcome."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry


def set_title(e: Expectation, title: str) -> Expectation:
    e.title = title
    return e


def install(registry: MatcherRegistry) -> None:
    registry.add(("set_title", "$"), set_title)
