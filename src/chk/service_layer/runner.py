"""Runner: the top-level collection of root test nodes.

A runner is constructed explicitly and threaded through the test environment;
the module-level ``chk.test``/``chk.expect`` shims in
:mod:`chk.entrypoints.api` merely point at a default instance.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from chk.domain.node import TestEnvironment, TestNode, TestOptions
from chk.domain.report import ReportOptions, RunSummary
from chk.service_layer.snapshots import SnapshotTest

if TYPE_CHECKING:
    from chk.interfaces.reporter import Reporter
    from chk.service_layer.snapshots import SnapshotSession

logger = logging.getLogger(__name__)

__all__ = ["Runner"]


class Runner:
    """Collect root test nodes and run, report and tally them in bulk.

    Args:
        env: Shared collaborators (matcher registry, snapshot session,
            call-site capture, default timeout). A fresh one by default.
        reporter: Sink for :meth:`report`; when None, reports are only
            returned.
    """

    def __init__(
        self, env: TestEnvironment | None = None, reporter: Reporter | None = None
    ) -> None:
        self.env = env if env is not None else TestEnvironment()
        self.reporter = reporter
        self.tests: list[TestNode] = []
        self.passed = 0
        self.failed = 0
        self.duration_ms: float | None = None

    @property
    def snapshots(self) -> SnapshotSession | None:
        return self.env.snapshots

    # --- Registration ---

    def define(
        self,
        subject: Any,
        options: TestOptions | Mapping[str, Any] | Callable[..., Any] | None = None,
        body: Callable[..., Any] | None = None,
    ) -> TestNode:
        """Register a root test node; usable as a decorator without *body*."""
        if body is None and callable(options):
            body, options = options, None
        return self.add(TestNode(subject, options, body, env=self.env))

    def add(self, node: TestNode) -> TestNode:
        """Register an already built node as a root."""
        node.parent = None
        node.env = self.env
        self.tests.append(node)
        return node

    def snapshot(
        self,
        snapshot_id: str,
        props: Any = None,
        render: Callable[..., Any] | Any = None,
        options: TestOptions | None = None,
    ) -> SnapshotTest:
        """Register a root snapshot test."""
        node = SnapshotTest(snapshot_id, props, render, options, env=self.env)
        self.add(node)
        return node

    def clear(self) -> None:
        """Drop every registered root node."""
        self.tests.clear()

    # --- Execution ---

    async def test(self, interactive: bool = False) -> None:
        """Run every root node: concurrently, or one at a time when interactive."""
        if self.env.snapshots is not None:
            self.env.snapshots.interactive = interactive
        start = time.perf_counter()
        if interactive:
            for node in self.tests:
                await node.test(interactive)
        else:
            await asyncio.gather(*(node.test(interactive) for node in self.tests))
        self.duration_ms = (time.perf_counter() - start) * 1000
        logger.info("TEST %.1f ms", self.duration_ms)

    async def run(self, options: ReportOptions | None = None) -> RunSummary:
        """Reset run-scoped snapshot state, test everything, then report.

        Test failures and body exceptions never raise out of here; they are
        expressed in the returned summary.
        """
        options = options or ReportOptions()
        if self.env.snapshots is not None:
            self.env.snapshots.reset()
        await self.test(options.interactive)
        return self.report(options)

    # --- Reporting ---

    @property
    def result(self) -> bool:
        return all(node.passed for node in self.tests)

    def summary(self) -> RunSummary:
        """Count outcomes and errored nodes across every root."""
        passed = failed = errors = 0
        for root in self.tests:
            for node in root.walk():
                if node.error is not None:
                    errors += 1
                for expectation in node.expectations():
                    for outcome in expectation.outcomes:
                        if outcome.result is True:
                            passed += 1
                        elif outcome.result is False:
                            failed += 1
        return RunSummary(passed, failed, errors, self.duration_ms)

    def report(self, options: ReportOptions | None = None) -> RunSummary:
        """Build every root's report, hand it to the reporter, and tally.

        Resets and refills the ``passed``/``failed`` counters.
        """
        options = options or ReportOptions()
        lines = [node.report(options) for node in self.tests]
        summary = self.summary()
        self.passed, self.failed = summary.passed, summary.failed
        if self.reporter is not None:
            self.reporter.report(lines, summary)
        logger.debug("Report: %d passed, %d failed", summary.passed, summary.failed)
        return summary

    def json(self) -> list[dict[str, Any]]:
        """JSON-ready view of every root; call after :meth:`test` settles."""
        return [node.json() for node in self.tests]
