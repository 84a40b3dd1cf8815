"""Matcher registry and the built-in matcher families.

Each family module exposes ``install(registry)``. :func:`default_registry`
returns the shared registry with every family installed; use
``default_registry().copy()`` to extend it without affecting other runners.
"""

from __future__ import annotations

from functools import lru_cache

from . import (
    asynchronous,
    comparison,
    containers,
    equality,
    errors,
    mocks,
    titles,
    values,
)
from .registry import MatcherFn, MatcherRegistry, Messenger, binary, unary

__all__ = [
    "FAMILIES",
    "MatcherFn",
    "MatcherRegistry",
    "Messenger",
    "binary",
    "build_registry",
    "default_registry",
    "unary",
]

FAMILIES = (equality, comparison, values, containers, errors, titles, mocks, asynchronous)


def build_registry() -> MatcherRegistry:
    """Return a fresh registry with every built-in family installed."""
    registry = MatcherRegistry()
    for family in FAMILIES:
        family.install(registry)
    return registry


@lru_cache(maxsize=1)
def default_registry() -> MatcherRegistry:
    """The shared built-in registry."""
    return build_registry()
