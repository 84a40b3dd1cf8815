"""Numeric comparison matchers."""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry


def _compare(op: Callable[[Any, Any], Any], subject: Any, target: Any) -> bool:
    """Apply *op*; values that cannot be ordered simply do not satisfy it."""
    try:
        return bool(op(subject, target))
    except TypeError:
        return False


def _comparison(key: str, op: Callable[[Any, Any], Any]) -> Callable[..., Expectation]:
    def matcher(e: Expectation, target: Any) -> Expectation:
        return e.process(key, _compare(op, e.subject, target), e.subject, target)

    matcher.__name__ = matcher.__qualname__ = f"compare_{op.__name__}"
    matcher.__doc__ = f"Pass when ``subject {key} target``."
    return matcher


greater_than = _comparison(">", operator.gt)
greater_than_or_equal = _comparison(">=", operator.ge)
less_than = _comparison("<", operator.lt)
less_than_or_equal = _comparison("<=", operator.le)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def to_be_close_to(e: Expectation, expected: float, precision: int = 2) -> Expectation:
    """Pass when subject and expected agree to *precision* decimal places."""
    received = e.subject
    try:
        if math.isnan(received) or math.isnan(expected):
            passed = False
        else:
            multiplier = 10**precision
            passed = _round_half_up(received * multiplier) == _round_half_up(
                expected * multiplier
            )
    except TypeError:
        passed = False
    return e.process("to_be_close_to", passed, received, expected)


def install(registry: MatcherRegistry) -> None:
    """Register the comparison matchers."""
    registry.add(("greater_than", ">", "to_be_greater_than"), greater_than)
    registry.add((">=", "to_be_greater_than_or_equal"), greater_than_or_equal)
    registry.add(("less_than", "<", "to_be_less_than"), less_than)
    registry.add(("<=", "to_be_less_than_or_equal"), less_than_or_equal)
    registry.add("to_be_close_to", to_be_close_to)
