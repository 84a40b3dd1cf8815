"""Matchers that return a coroutine.

The ``to_have_resolved*`` family awaits every recorded ``"return"`` value of a
mock (values that are not awaitable count as resolved to themselves) and
ignores results whose awaitable raised. ``to_match_snapshot`` consults the
snapshot session attached to the expectation.

Argument checks happen when the matcher is called; only the comparison is
deferred. A body that forgets to ``await`` still gets its outcome, because the
owning test node settles pending matcher coroutines after the body returns.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

from chk.domain.equality import equals
from chk.domain.errors import ChkError
from chk.domain.matchers.registry import require_mock, unary
from chk.domain.serialization import serialize_output, serialize_props

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation
    from chk.domain.matchers.registry import MatcherRegistry
    from chk.domain.mock import MockFunction
    from chk.service_layer.snapshots import SnapshotSession


_REJECTED = object()


async def _settle(value: Any) -> Any:
    if not inspect.isawaitable(value):
        return value
    try:
        return await value
    except Exception:  # pylint: disable=broad-exception-caught
        return _REJECTED


async def _resolved_values(mock: MockFunction) -> list[Any]:
    settled = [
        await _settle(result.value)
        for result in mock.mock.results
        if result.type == "return"
    ]
    return [value for value in settled if value is not _REJECTED]


async def _check_resolved(
    e: Expectation,
    key: str,
    mock: MockFunction,
    target: Any,
    predicate: Callable[[list[Any]], bool],
) -> Expectation:
    values = await _resolved_values(mock)
    return e.process(key, predicate(values), mock, target)


def to_have_resolved(e: Expectation) -> Coroutine[Any, Any, Expectation]:
    mock = require_mock(e, "to_have_resolved")
    return _check_resolved(e, "to_have_resolved", mock, None, bool)


def to_have_resolved_times(e: Expectation, times: int) -> Coroutine[Any, Any, Expectation]:
    mock = require_mock(e, "to_have_resolved_times")
    return _check_resolved(
        e, "to_have_resolved_times", mock, times, lambda values: len(values) == times
    )


def to_have_resolved_with(e: Expectation, value: Any) -> Coroutine[Any, Any, Expectation]:
    mock = require_mock(e, "to_have_resolved_with")
    return _check_resolved(
        e,
        "to_have_resolved_with",
        mock,
        value,
        lambda values: any(equals(v, value) for v in values),
    )


def to_have_last_resolved_with(
    e: Expectation, value: Any
) -> Coroutine[Any, Any, Expectation]:
    mock = require_mock(e, "to_have_last_resolved_with")
    return _check_resolved(
        e,
        "to_have_last_resolved_with",
        mock,
        value,
        lambda values: bool(values) and equals(values[-1], value),
    )


def to_have_nth_resolved_with(
    e: Expectation, nth: int, value: Any
) -> Coroutine[Any, Any, Expectation]:
    """Pass when the *nth* (1-indexed) resolved value equals *value*."""
    mock = require_mock(e, "to_have_nth_resolved_with")
    return _check_resolved(
        e,
        "to_have_nth_resolved_with",
        mock,
        value,
        lambda values: 1 <= nth <= len(values) and equals(values[nth - 1], value),
    )


def to_match_snapshot(
    e: Expectation, snapshot_id: str, props: Any = None
) -> Coroutine[Any, Any, Expectation]:
    """Compare the subject (rendered output) against a stored snapshot.

    The first run for *snapshot_id* stores the snapshot and passes. Later runs
    pass only when both the output and the serialized *props* match. A failing
    comparison never overwrites the stored snapshot.

    Raises:
        ChkError: If the expectation was created without a snapshot session.
    """
    session = e.snapshots
    if session is None:
        raise ChkError("to_match_snapshot() needs an expectation bound to a runner.")
    return _check_snapshot(e, session, snapshot_id, props)


async def _check_snapshot(
    e: Expectation, session: SnapshotSession, snapshot_id: str, props: Any
) -> Expectation:
    output = serialize_output(e.subject)
    status = await session.check(snapshot_id, serialize_props(props), output)
    return e.process(
        "to_match_snapshot",
        status.result,
        output,
        snapshot_id,
        detail=status.detail,
    )


def install(registry: MatcherRegistry) -> None:
    """Register the asynchronous matchers."""
    registry.add("to_have_resolved", to_have_resolved, messenger=unary)
    registry.add("to_have_resolved_times", to_have_resolved_times)
    registry.add("to_have_resolved_with", to_have_resolved_with)
    registry.add("to_have_last_resolved_with", to_have_last_resolved_with)
    registry.add("to_have_nth_resolved_with", to_have_nth_resolved_with)
    registry.add("to_match_snapshot", to_match_snapshot)
