"""Exception matchers.

The subject is either an exception (typically after ``await e.rejects``) or a
callable, which is invoked and whose exception, if any, becomes the subject.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry


def _raised(e: Expectation) -> BaseException | None:
    subject = e.subject
    if isinstance(subject, BaseException):
        return subject
    if callable(subject) and not isinstance(subject, type):
        try:
            subject()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            e.subject = exc
            return exc
    return None


def _matches(error: BaseException, expected: Any) -> bool:
    if expected is None:
        return True
    if isinstance(expected, type) and issubclass(expected, BaseException):
        return isinstance(error, expected)
    if isinstance(expected, re.Pattern):
        return expected.search(str(error)) is not None
    if isinstance(expected, BaseException):
        return type(error) is type(expected) and str(error) == str(expected)
    return str(error) == expected


def to_throw(e: Expectation, expected: Any = None) -> Expectation:
    """Pass when an exception was raised that fits *expected*.

    Args:
        e: The expectation.
        expected: None (any exception), a message string (exact), a compiled
            regex (searched), an exception class, or an exception instance
            (same type and message).
    """
    error = _raised(e)
    passed = error is not None and _matches(error, expected)
    return e.process("to_throw", passed, e.subject, expected)


def to_throw_error_contains(e: Expectation, text: str) -> Expectation:
    """Pass when the raised exception's message contains *text*."""
    error = _raised(e)
    passed = error is not None and text in str(error)
    return e.process("to_throw_error_contains", passed, e.subject, text)


def install(registry: MatcherRegistry) -> None:
    """Register the exception matchers."""
    registry.add("to_throw", to_throw)
    registry.add("to_throw_error_contains", to_throw_error_contains)
