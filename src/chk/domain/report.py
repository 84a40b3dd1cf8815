"""Report value objects.

``TestNode.report`` builds a tree of :class:`ReportLine` values; rendering
(terminal, memory, anything else) is a Reporter's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

Status: TypeAlias = bool | Literal["info", "warn"]


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Options shared by ``report`` and ``run``.

    Attributes:
        head: Summary only; omit expectation lines.
        no_location: Hide source locations of passing entries. Failures always
            show their location.
        interactive: Run siblings sequentially and prompt on snapshot mismatches.
    """

    head: bool = False
    no_location: bool = False
    interactive: bool = False


@dataclass(slots=True)
class ReportLine:
    """One rendered entry of the report tree.

    Attributes:
        status: True/False for pass/fail, ``"info"``/``"warn"`` for notes.
        text: Title or formatted outcome.
        location: ``file:line`` when it should be shown.
        detail: Extra block (diff, error text).
        collapsed: Whether renderers should fold the children by default.
        children: Nested lines.
    """

    status: Status
    text: str
    location: str | None = None
    detail: str | None = None
    collapsed: bool = False
    children: list[ReportLine] = field(default_factory=list)

    def walk(self):
        """Yield this line and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Pass/fail tallies for one report.

    Attributes:
        passed: Outcomes whose result is True.
        failed: Outcomes whose result is False.
        errors: Test nodes whose body raised.
        duration_ms: Wall time of the test phase, when known.
    """

    passed: int = 0
    failed: int = 0
    errors: int = 0
    duration_ms: float | None = None

    @property
    def ok(self) -> bool:
        """True when nothing failed and no body raised."""
        return self.failed == 0 and self.errors == 0

    @property
    def message(self) -> str:
        """One-line human summary."""
        if self.failed:
            return f"Tests completed with {self.failed} failure(s)"
        if self.errors:
            return f"Tests completed with {self.errors} error(s)"
        return "All tests completed successfully!"
