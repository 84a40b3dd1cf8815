"""Equality primitives used by the matchers.

Three notions of equality are provided:

- ``equals``: structural ("deep") equality. Numbers compare by value across
  ``int``/``float``, other values must share their exact type; sequences are
  compared element-wise, mappings by key set then per key, plain objects by
  their ``vars()``. An ``any_instance(...)`` marker in the *expected* position
  short-circuits to a type check.
- ``strict_equals``: identity for objects, value for numbers and strings.
- ``strict_deep_equals``: structural equality that also requires identical
  types for numbers (``1`` is not strictly equal to ``1.0``).

The ``anything()`` marker is deliberately *not* special-cased here; the
expectation layer inverts outcomes whose target carries it.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable, Mapping
from numbers import Number
from typing import Any

__all__ = [
    "AnyInstance",
    "Anything",
    "any_instance",
    "anything",
    "equals",
    "is_anything",
    "match_object",
    "strict_deep_equals",
    "strict_equals",
]

# ============================================================================
#                               Markers
# ============================================================================


class AnyInstance:
    """Marker matching any value of the given type (``expect.any(Type)``)."""

    __slots__ = ("expected",)

    def __init__(self, expected: type | Callable[..., Any] | None) -> None:
        self.expected = expected

    def matches(self, received: Any) -> bool:
        """Return True if *received* is acceptable for the wrapped type."""
        expected = self.expected
        # pylint: disable=too-many-return-statements
        if expected is None or expected is type(None):
            return received is None
        if expected is bool:
            return isinstance(received, bool)
        if expected is int:
            return isinstance(received, int) and not isinstance(received, bool)
        if expected in (float, Number):
            return _is_number(received)
        if expected is callable or expected is Callable:
            return callable(received)
        if expected is object:
            return received is not None
        if isinstance(expected, type):
            return isinstance(received, expected)
        return False

    def __repr__(self) -> str:
        name = getattr(self.expected, "__name__", repr(self.expected))
        return f"any({name})"


class Anything:
    """Singleton "don't care" marker (``expect.anything()``)."""

    _instance: Anything | None = None

    def __new__(cls) -> Anything:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "anything"


ANYTHING = Anything()


def any_instance(expected: type | Callable[..., Any] | None) -> AnyInstance:
    """Return a marker that equals any instance of *expected*."""
    return AnyInstance(expected)


def anything() -> Anything:
    """Return the ``anything`` marker."""
    return ANYTHING


def is_anything(value: Any) -> bool:
    """Return True if *value* is, or is a list/tuple containing, the anything marker."""
    if isinstance(value, Anything):
        return True
    if isinstance(value, (list, tuple)):
        return any(isinstance(item, Anything) for item in value)
    return False


# ============================================================================
#                               Helpers
# ============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _has_custom_eq(value: Any) -> bool:
    return type(value).__eq__ is not object.__eq__


# ============================================================================
#                               Comparisons
# ============================================================================


def equals(a: Any, b: Any) -> bool:  # pylint: disable=too-many-return-statements
    """Structural equality of *a* (received) and *b* (expected).

    Args:
        a: The received value.
        b: The expected value; may be an ``any_instance`` marker.

    Returns:
        bool: True when the two values are structurally equal.
    """
    if isinstance(b, AnyInstance):
        return b.matches(a)
    if _is_number(a) and _is_number(b):
        return a == b
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(equals(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping):
        if a.keys() != b.keys():
            return False
        return all(equals(a[key], b[key]) for key in a)
    if dataclasses.is_dataclass(a):
        return all(
            equals(getattr(a, f.name), getattr(b, f.name))
            for f in dataclasses.fields(a)
        )
    if _has_custom_eq(a):
        return bool(a == b)
    if hasattr(a, "__dict__"):
        return equals(vars(a), vars(b))
    return False


def strict_equals(a: Any, b: Any) -> bool:
    """Identity comparison, except numbers and strings which compare by value."""
    if _is_number(a) and _is_number(b):
        return a == b
    if a is b:
        return True
    if type(a) is type(b) and isinstance(a, (str, bytes)):
        return a == b
    return False


def strict_deep_equals(a: Any, b: Any) -> bool:  # pylint: disable=too-many-return-statements
    """Structural equality that also requires identical types at every level."""
    if type(a) is not type(b):
        return False
    if isinstance(a, float) and math.isnan(a):
        return False
    if a is b:
        return True
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(
            strict_deep_equals(x, y) for x, y in zip(a, b)
        )
    if isinstance(a, Mapping):
        if a.keys() != b.keys():
            return False
        return all(strict_deep_equals(a[key], b[key]) for key in a)
    if dataclasses.is_dataclass(a):
        return all(
            strict_deep_equals(getattr(a, f.name), getattr(b, f.name))
            for f in dataclasses.fields(a)
        )
    if _has_custom_eq(a):
        return bool(a == b)
    if hasattr(a, "__dict__"):
        return strict_deep_equals(vars(a), vars(b))
    return False


def match_object(received: Any, expected: Any) -> bool:
    """Recursive subset match: every key in *expected* must match in *received*.

    Mappings are matched by key, objects by attribute; lists of the same length
    are matched element-wise; anything else falls back to :func:`equals`.
    """
    if received is expected:
        return True
    if isinstance(expected, Mapping):
        for key, value in expected.items():
            if isinstance(received, Mapping):
                if key not in received:
                    return False
                actual = received[key]
            elif isinstance(key, str) and hasattr(received, key):
                actual = getattr(received, key)
            else:
                return False
            if not match_object(actual, value):
                return False
        return True
    if isinstance(expected, list) and isinstance(received, list):
        return len(received) == len(expected) and all(
            match_object(x, y) for x, y in zip(received, expected)
        )
    return equals(received, expected)
