"""Interactive snapshot prompt interface."""

from __future__ import annotations

import abc
import enum


class SnapshotChoice(str, enum.Enum):
    """Answers to a snapshot mismatch prompt."""

    ACCEPT = "accept"
    REJECT = "reject"
    ACCEPT_ALL = "accept-all"
    CANCEL = "cancel"


class Prompter(abc.ABC):
    """Asks the user what to do about a snapshot mismatch."""

    @abc.abstractmethod
    async def choose(self, snapshot_id: str, diff: str) -> SnapshotChoice:
        """Show *diff* and wait for a decision.

        Args:
            snapshot_id (str): Normalized identifier of the mismatching snapshot.
            diff (str): Character-level output diff, or props diff.

        Returns:
            SnapshotChoice: The user's answer.
        """
