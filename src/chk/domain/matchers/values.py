"""Matchers about a single value: presence, truthiness, type."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from chk.domain.equality import equals
from chk.domain.matchers.registry import unary

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry


def to_be_defined(e: Expectation) -> Expectation:
    """Pass when the subject is not None."""
    return e.process("to_be_defined", e.subject is not None, e.subject, None)


def to_be_undefined(e: Expectation) -> Expectation:
    """Pass when the subject is None."""
    return e.process("to_be_undefined", e.subject is None, e.subject, None)


def to_be_none(e: Expectation) -> Expectation:
    """Pass when the subject is None."""
    return e.process("to_be_none", e.subject is None, e.subject, None)


def to_be_truthy(e: Expectation) -> Expectation:
    return e.process("to_be_truthy", bool(e.subject), e.subject, None)


def to_be_falsy(e: Expectation) -> Expectation:
    return e.process("to_be_falsy", not e.subject, e.subject, None)


def to_be_nan(e: Expectation) -> Expectation:
    passed = isinstance(e.subject, float) and math.isnan(e.subject)
    return e.process("to_be_nan", passed, e.subject, None)


def to_be_instance_of(e: Expectation, cls: type | tuple[type, ...]) -> Expectation:
    return e.process("to_be_instance_of", isinstance(e.subject, cls), e.subject, cls)


def to_be_one_of(e: Expectation, values: Iterable[Any]) -> Expectation:
    """Pass when the subject deep-equals one of *values*."""
    values = list(values)
    passed = any(equals(e.subject, value) for value in values)
    return e.process("to_be_one_of", passed, e.subject, values)


def to_be_type_of(e: Expectation, expected: str | type) -> Expectation:
    """Pass when the subject's type matches *expected*.

    *expected* may be a type (exact match) or a type name. The name
    ``"function"`` matches any callable that is not a class.
    """
    subject = e.subject
    if isinstance(expected, type):
        passed = type(subject) is expected
    elif expected == "function":
        passed = callable(subject) and not isinstance(subject, type)
    else:
        passed = type(subject).__name__ == expected
    return e.process("to_be_type_of", passed, subject, expected)


def to_satisfy(e: Expectation, predicate: Callable[[Any], Any]) -> Expectation:
    """Pass when ``predicate(subject)`` is truthy."""
    return e.process("to_satisfy", bool(predicate(e.subject)), e.subject, predicate)


def install(registry: MatcherRegistry) -> None:
    """Register the value matchers."""
    registry.add("to_be_defined", to_be_defined, messenger=unary)
    registry.add("to_be_undefined", to_be_undefined, messenger=unary)
    registry.add(
        ("to_be_none", "to_be_null"), to_be_none, messenger=unary, keys=("to_be_none",)
    )
    registry.add("to_be_truthy", to_be_truthy, messenger=unary)
    registry.add("to_be_falsy", to_be_falsy, messenger=unary)
    registry.add("to_be_nan", to_be_nan, messenger=unary)
    registry.add("to_be_instance_of", to_be_instance_of)
    registry.add("to_be_one_of", to_be_one_of)
    registry.add("to_be_type_of", to_be_type_of)
    registry.add("to_satisfy", to_satisfy)
