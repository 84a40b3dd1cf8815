"""Equality matchers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chk.domain.equality import equals, match_object, strict_deep_equals, strict_equals

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry


def eq(e: Expectation, target: Any) -> Expectation:
    """Deep equality."""
    return e.process("==", equals(e.subject, target), e.subject, target)


def deq(e: Expectation, target: Any) -> Expectation:
    """Strict (identity) equality."""
    return e.process("===", strict_equals(e.subject, target), e.subject, target)


def neq(e: Expectation, target: Any) -> Expectation:
    """Deep inequality."""
    return e.process("!=", not equals(e.subject, target), e.subject, target)


def not_deq(e: Expectation, target: Any) -> Expectation:
    """Strict inequality."""
    return e.process("!==", not strict_equals(e.subject, target), e.subject, target)


def to_strict_equal(e: Expectation, target: Any) -> Expectation:
    """Deep equality that also requires identical types at every level."""
    return e.process(
        "to_strict_equal", strict_deep_equals(e.subject, target), e.subject, target
    )


def to_match_object(e: Expectation, target: Any) -> Expectation:
    """Recursive subset match of mappings/attributes."""
    return e.process("to_match_object", match_object(e.subject, target), e.subject, target)


def install(registry: MatcherRegistry) -> None:
    """Register the equality matchers."""
    registry.add(("eq", "==", "to_equal"), eq)
    registry.add(("deq", "===", "to_be"), deq)
    registry.add(("neq", "!="), neq)
    registry.add(("!==", "not_deq"), not_deq)
    registry.add("to_strict_equal", to_strict_equal)
    registry.add("to_match_object", to_match_object)
