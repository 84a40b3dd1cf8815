"""Unit tests for the report sinks."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from chk.adapters.reporter.memory import MemoryReporter
from chk.adapters.reporter.rich_console import RichConsoleReporter
from chk.domain.report import ReportLine, RunSummary

# pylint: disable=redefined-outer-name,magic-value-comparison


@pytest.fixture
def lines() -> list[ReportLine]:
    passing = ReportLine(
        True,
        "math",
        "checks.py:1",
        collapsed=True,
        children=[ReportLine(True, "1 == 1", "checks.py:2")],
    )
    failing = ReportLine(
        False,
        "strings",
        "checks.py:5",
        children=[
            ReportLine(False, '"a" == "b"', "checks.py:6", detail="[-a-]{+b+}"),
            ReportLine("warn", "save_failed", None),
        ],
    )
    return [passing, failing]


def render(reporter: RichConsoleReporter) -> str:
    return reporter.console.export_text()


def recording_console() -> Console:
    return Console(record=True, width=120, color_system=None, file=io.StringIO())


class TestRichConsoleReporter:
    @staticmethod
    def test_collapses_passing_subtrees(lines):
        reporter = RichConsoleReporter(recording_console())
        reporter.report(lines, RunSummary(1, 1, 0, 12.34))
        text = render(reporter)

        assert "✓ math  checks.py:1" in text
        assert "1 == 1" not in text
        assert '✗ "a" == "b"  checks.py:6' in text
        assert "[-a-]{+b+}" in text
        assert "! save_failed" in text
        assert "Tests completed with 1 failure(s) (1 passed, 1 failed in 12.3 ms)" in text

    @staticmethod
    def test_expand_shows_passing_children(lines):
        reporter = RichConsoleReporter(recording_console(), expand=True)
        reporter.report(lines, RunSummary(1, 1))
        text = render(reporter)
        assert "✓ 1 == 1  checks.py:2" in text
        assert "(1 passed, 1 failed)" in text

    @staticmethod
    def test_errors_in_summary():
        reporter = RichConsoleReporter(recording_console())
        reporter.report(
            [ReportLine(False, "broken", detail="RuntimeError: kaput")],
            RunSummary(0, 0, 1),
        )
        text = render(reporter)
        assert "RuntimeError: kaput" in text
        assert "Tests completed with 1 error(s) (0 passed, 0 failed, 1 errored)" in text

    @staticmethod
    def test_all_passed_message():
        reporter = RichConsoleReporter(recording_console())
        reporter.report([], RunSummary(3, 0))
        assert "All tests completed successfully! (3 passed, 0 failed)" in render(reporter)


class TestMemoryReporter:
    @staticmethod
    def test_empty():
        reporter = MemoryReporter()
        assert reporter.last_summary is None
        assert reporter.texts() == []

    @staticmethod
    def test_keeps_every_report(lines):
        reporter = MemoryReporter()
        reporter.report(lines[:1], RunSummary(1, 0))
        reporter.report(lines, RunSummary(1, 1))
        assert len(reporter.reports) == 2
        assert reporter.last_summary == RunSummary(1, 1)
        assert reporter.texts() == ["math", "1 == 1", "strings", '"a" == "b"', "save_failed"]
