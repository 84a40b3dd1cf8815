"""Mock-call matchers.

All of these read ``subject.mock`` without mutating it and raise
:class:`~chk.domain.errors.MockUsageError` when the subject is not a mock.
Call arguments are compared with deep equality: positional arguments as a
list, keyword arguments as a dict.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chk.domain.equality import equals
from chk.domain.matchers.registry import require_mock, unary

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry
    from chk.domain.mock import Call, MockFunction, MockResult


def _call_matches(call: Call, args: tuple[Any, ...], kwargs: dict[str, Any]) -> bool:
    return equals(list(call.args), list(args)) and equals(call.kwargs, kwargs)


def _returns(mock: MockFunction) -> list[MockResult]:
    return [r for r in mock.mock.results if r.type == "return"]


# --- Calls ---


def to_have_been_called(e: Expectation) -> Expectation:
    mock = require_mock(e, "to_have_been_called")
    return e.process("to_have_been_called", len(mock.mock.calls) > 0, mock, None)


def to_have_been_called_times(e: Expectation, times: int) -> Expectation:
    mock = require_mock(e, "to_have_been_called_times")
    return e.process(
        "to_have_been_called_times", len(mock.mock.calls) == times, mock, times
    )


def to_have_been_called_with(e: Expectation, *args: Any, **kwargs: Any) -> Expectation:
    """Pass when some recorded call matches the arguments."""
    mock = require_mock(e, "to_have_been_called_with")
    passed = any(_call_matches(call, args, kwargs) for call in mock.mock.calls)
    return e.process("to_have_been_called_with", passed, mock, list(args))


def to_have_been_nth_called_with(
    e: Expectation, nth: int, *args: Any, **kwargs: Any
) -> Expectation:
    """Pass when the *nth* (1-indexed) call matches the arguments."""
    mock = require_mock(e, "to_have_been_nth_called_with")
    calls = mock.mock.calls
    passed = 1 <= nth <= len(calls) and _call_matches(calls[nth - 1], args, kwargs)
    return e.process("to_have_been_nth_called_with", passed, mock, list(args))


def to_have_been_last_called_with(
    e: Expectation, *args: Any, **kwargs: Any
) -> Expectation:
    mock = require_mock(e, "to_have_been_last_called_with")
    last = mock.mock.last_call
    passed = last is not None and _call_matches(last, args, kwargs)
    return e.process("to_have_been_last_called_with", passed, mock, list(args))


# --- Returns ---


def to_have_returned(e: Expectation) -> Expectation:
    """Pass when at least one call returned without raising."""
    mock = require_mock(e, "to_have_returned")
    return e.process("to_have_returned", bool(_returns(mock)), mock, None)


def to_have_returned_times(e: Expectation, times: int) -> Expectation:
    mock = require_mock(e, "to_have_returned_times")
    return e.process("to_have_returned_times", len(_returns(mock)) == times, mock, times)


def to_have_returned_with(e: Expectation, value: Any) -> Expectation:
    mock = require_mock(e, "to_have_returned_with")
    passed = any(equals(r.value, value) for r in _returns(mock))
    return e.process("to_have_returned_with", passed, mock, value)


def to_have_last_returned_with(e: Expectation, value: Any) -> Expectation:
    mock = require_mock(e, "to_have_last_returned_with")
    results = mock.mock.results
    passed = (
        bool(results)
        and results[-1].type == "return"
        and equals(results[-1].value, value)
    )
    return e.process("to_have_last_returned_with", passed, mock, value)


def to_have_nth_returned_with(e: Expectation, nth: int, value: Any) -> Expectation:
    """Pass when the *nth* (1-indexed) successful return equals *value*."""
    mock = require_mock(e, "to_have_nth_returned_with")
    returns = _returns(mock)
    passed = 1 <= nth <= len(returns) and equals(returns[nth - 1].value, value)
    return e.process("to_have_nth_returned_with", passed, mock, value)


def install(registry: MatcherRegistry) -> None:
    """Register the mock-call matchers."""
    registry.add("to_have_been_called", to_have_been_called, messenger=unary)
    registry.add("to_have_been_called_times", to_have_been_called_times)
    registry.add("to_have_been_called_with", to_have_been_called_with)
    registry.add("to_have_been_nth_called_with", to_have_been_nth_called_with)
    registry.add("to_have_been_last_called_with", to_have_been_last_called_with)
    registry.add("to_have_returned", to_have_returned, messenger=unary)
    registry.add("to_have_returned_times", to_have_returned_times)
    registry.add("to_have_returned_with", to_have_returned_with)
    registry.add("to_have_last_returned_with", to_have_last_returned_with)
    registry.add("to_have_nth_returned_with", to_have_nth_returned_with)
