"""Terminal snapshot prompt built on click.

The diff goes to stderr; the answer is read with :func:`click.prompt` in a
worker thread so the event loop is not blocked while waiting for input.
Interactive runs execute test nodes sequentially, so only one prompt is ever
open at a time.
"""

from __future__ import annotations

import asyncio
import logging

import click

from chk.interfaces.prompter import Prompter, SnapshotChoice

logger = logging.getLogger(__name__)

__all__ = ["ClickPrompter"]

CHOICES = [choice.value for choice in SnapshotChoice]


class ClickPrompter(Prompter):
    """Ask accept / reject / accept-all / cancel on the terminal."""

    def __init__(self, default: SnapshotChoice = SnapshotChoice.REJECT) -> None:
        self.default = default

    async def choose(self, snapshot_id: str, diff: str) -> SnapshotChoice:
        click.secho(f"Snapshot mismatch: {snapshot_id}", fg="yellow", bold=True, err=True)
        click.echo(diff, err=True)
        answer = await asyncio.to_thread(
            click.prompt,
            "Update snapshot?",
            type=click.Choice(CHOICES),
            default=self.default.value,
            err=True,
        )
        logger.debug("Snapshot %s: user chose %s", snapshot_id, answer)
        return SnapshotChoice(answer)
