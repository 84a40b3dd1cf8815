"""Report sink interface."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chk.domain.report import ReportLine, RunSummary


class Reporter(abc.ABC):
    """Receives the report trees of one run and its summary."""

    @abc.abstractmethod
    def report(self, lines: Sequence[ReportLine], summary: RunSummary) -> None:
        """Emit the report.

        Args:
            lines (Sequence[ReportLine]): One tree per root test node.
            summary (RunSummary): Tallies for the whole run.
        """
