"""Rich terminal report sink.

Renders each root report line as a :class:`rich.tree.Tree`. Passing subtrees
are collapsed to their title unless ``expand`` is set; failing entries always
show their children, location and detail.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.text import Text
from rich.tree import Tree

from chk.interfaces.reporter import Reporter

if TYPE_CHECKING:
    from chk.domain.report import ReportLine, RunSummary, Status

__all__ = ["RichConsoleReporter"]

_GLYPHS: dict[object, tuple[str, str]] = {
    True: ("✓", "green"),
    False: ("✗", "bold red"),
    "info": ("i", "blue"),
    "warn": ("!", "yellow"),
}


def _glyph(status: Status) -> tuple[str, str]:
    return _GLYPHS.get(status, ("?", "magenta"))


class RichConsoleReporter(Reporter):
    """Print report trees and the summary line on a rich Console."""

    def __init__(self, console: Console | None = None, *, expand: bool = False) -> None:
        self.console = console or Console()
        self.expand = expand

    def report(self, lines: Sequence[ReportLine], summary: RunSummary) -> None:
        for line in lines:
            tree = Tree(self._label(line))
            self._add_children(tree, line)
            self.console.print(tree)

        style = "bold green" if summary.ok else "bold red"
        counts = f"{summary.passed} passed, {summary.failed} failed"
        if summary.errors:
            counts += f", {summary.errors} errored"
        if summary.duration_ms is not None:
            counts += f" in {summary.duration_ms:.1f} ms"
        self.console.print(Text(f"{summary.message} ({counts})", style=style))

    def _add_children(self, tree: Tree, line: ReportLine) -> None:
        if line.collapsed and not self.expand:
            return
        for child in line.children:
            self._add_children(tree.add(self._label(child)), child)

    @staticmethod
    def _label(line: ReportLine) -> Text | Group:
        glyph, style = _glyph(line.status)
        label = Text.assemble((glyph, style), " ", line.text)
        if line.location:
            label.append(f"  {line.location}", style="dim")
        if not line.detail:
            return label
        return Group(label, Text(line.detail, style="dim" if line.status else "red"))
