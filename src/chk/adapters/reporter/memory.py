"""Report sink that keeps what it receives, for tests and programmatic use."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from chk.interfaces.reporter import Reporter

if TYPE_CHECKING:
    from chk.domain.report import ReportLine, RunSummary


class MemoryReporter(Reporter):
    """Collect report trees and summaries in lists."""

    def __init__(self) -> None:
        self.reports: list[tuple[list[ReportLine], RunSummary]] = []

    def report(self, lines: Sequence[ReportLine], summary: RunSummary) -> None:
        self.reports.append((list(lines), summary))

    @property
    def last_summary(self) -> RunSummary | None:
        return self.reports[-1][1] if self.reports else None

    def texts(self) -> list[str]:
        """Text of every line of the latest report, depth first."""
        if not self.reports:
            return []
        return [line.text for root in self.reports[-1][0] for line in root.walk()]
