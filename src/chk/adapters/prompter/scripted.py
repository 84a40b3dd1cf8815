"""Prompter that replays canned answers; used in tests and non-TTY runs."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from chk.interfaces.prompter import Prompter, SnapshotChoice


class ScriptedPrompter(Prompter):
    """Answer prompts from a queue, then fall back to *default*.

    Every prompt is recorded in ``asked`` as ``(snapshot_id, diff)``.
    """

    def __init__(
        self,
        answers: Iterable[SnapshotChoice | str] = (),
        default: SnapshotChoice = SnapshotChoice.REJECT,
    ) -> None:
        self._answers = deque(SnapshotChoice(a) for a in answers)
        self.default = default
        self.asked: list[tuple[str, str]] = []

    async def choose(self, snapshot_id: str, diff: str) -> SnapshotChoice:
        self.asked.append((snapshot_id, diff))
        if self._answers:
            return self._answers.popleft()
        return self.default
