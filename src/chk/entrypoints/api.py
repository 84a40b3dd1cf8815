"""Module-level test API.

``test``/``expect``/``snapshot`` delegate to the context of the test body
running in the current task. Outside any body, ``test`` and ``snapshot``
register root nodes on the default runner, which the CLI replaces with a
bootstrapped one before executing test files.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from chk.domain.errors import ContextError
from chk.domain.node import TestNode, TestOptions, current_context
from chk.service_layer.runner import Runner
from chk.service_layer.snapshots import SnapshotTest

if TYPE_CHECKING:
    from chk.domain.expectation import Expectation

__all__ = ["expect", "get_runner", "set_runner", "snapshot", "test"]

_runner: Runner | None = None


def get_runner() -> Runner:
    """The default runner, created on first use."""
    global _runner  # pylint: disable=global-statement
    if _runner is None:
        _runner = Runner()
    return _runner


def set_runner(runner: Runner | None) -> Runner | None:
    """Replace the default runner; returns the previous one."""
    global _runner  # pylint: disable=global-statement
    previous, _runner = _runner, runner
    return previous


def test(
    subject: Any,
    options: TestOptions | Mapping[str, Any] | Callable[..., Any] | None = None,
    body: Callable[..., Any] | None = None,
) -> TestNode:
    """Register a test: a child of the running body, or a root otherwise."""
    ctx = current_context()
    if ctx is not None:
        return ctx.test(subject, options, body)
    return get_runner().define(subject, options, body)


test.__test__ = False  # type: ignore[attr-defined]


def expect(subject: Any, title: str | None = None) -> Expectation:
    """Create an expectation in the running test body.

    Raises:
        ContextError: If no test body is running.
    """
    ctx = current_context()
    if ctx is None:
        raise ContextError("expect")
    return ctx.expect(subject, title)


def snapshot(
    snapshot_id: str,
    props: Any = None,
    render: Callable[..., Any] | Any = None,
    options: TestOptions | None = None,
) -> SnapshotTest:
    """Register a snapshot test under the running body, or as a root."""
    ctx = current_context()
    if ctx is None:
        return get_runner().snapshot(snapshot_id, props, render, options)
    node = SnapshotTest(snapshot_id, props, render, options, env=ctx.env)
    ctx.add(node)
    return node
