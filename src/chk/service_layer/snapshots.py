"""Snapshot comparison workflow.

:class:`SnapshotSession` sits between test nodes and a
:class:`~chk.interfaces.snapshot_store.SnapshotStore`. For every check it:

1. loads the stored record (a load failure is logged and treated as "no
   snapshot");
2. with no record, saves the current props/output and passes as
   ``new_snapshot``;
3. otherwise compares output, then the stored JSON form of the props;
4. on a mismatch in interactive mode asks the prompter (accept / reject /
   accept-all / cancel); accepting saves and compares again so the outcome
   reflects what was just written.

The ``accept_all`` and ``cancelled`` flags are run-scoped: the runner owns the
session and calls :meth:`SnapshotSession.reset` at the start of every run.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from chk.domain.errors import ChkError
from chk.domain.node import TestNode, TestOptions
from chk.domain.serialization import (
    char_diff,
    dumps,
    props_diff,
    serialize_output,
    serialize_props,
)
from chk.interfaces.prompter import SnapshotChoice
from chk.interfaces.snapshot_store import SnapshotRecord, SnapshotStoreError

if TYPE_CHECKING:
    from chk.domain.expectation import ResultType
    from chk.domain.node import TestContext
    from chk.interfaces.prompter import Prompter
    from chk.interfaces.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

__all__ = ["SnapshotCheck", "SnapshotSession", "SnapshotTest"]

NEW_SNAPSHOT = "new_snapshot"
MATCH = "match"
OUTPUT_MISMATCH = "output_mismatch"
PROPS_MISMATCH = "props_mismatch"
SAVE_FAILED = "save_failed"


def _same_props(stored: Any, current: Any) -> bool:
    # JSON text comparison: NaN equals NaN and 1 differs from True
    return dumps(serialize_props(stored)) == dumps(serialize_props(current))


@dataclass(frozen=True, slots=True)
class SnapshotCheck:
    """Result of one snapshot comparison.

    Attributes:
        key: One of ``new_snapshot``, ``match``, ``output_mismatch``,
            ``props_mismatch``, ``save_failed``.
        result: True/False, or ``"warn"`` when saving failed.
        detail: Diff or error text for the report.
    """

    key: str
    result: ResultType
    detail: str | None = None

    @property
    def passed(self) -> bool:
        return self.result is not False


class SnapshotSession:
    """Run-scoped snapshot comparator."""

    def __init__(self, store: SnapshotStore, prompter: Prompter | None = None) -> None:
        self.store = store
        self.prompter = prompter
        self.interactive = False
        self.accept_all = False
        self.cancelled = False
        self._prompt_lock = asyncio.Lock()

    def reset(self) -> None:
        """Forget accept-all and cancel decisions from a previous run."""
        self.accept_all = False
        self.cancelled = False

    # --- Store access ---

    def load(self, snapshot_id: str) -> SnapshotRecord | None:
        try:
            return self.store.load(snapshot_id)
        except SnapshotStoreError:
            logger.warning(
                "Could not load snapshot %s; treating it as new", snapshot_id, exc_info=True
            )
            return None

    def save(self, snapshot_id: str, props: Any, output: str) -> str | None:
        """Persist the current state.

        Returns:
            str | None: None on success, otherwise the error text.
        """
        try:
            self.store.save(snapshot_id, SnapshotRecord(props=props, output=output))
        except SnapshotStoreError as e:
            logger.error("Could not save snapshot %s: %s", snapshot_id, e)
            return str(e)
        logger.info("Saved snapshot %s", snapshot_id)
        return None

    # --- Comparison ---

    @staticmethod
    def compare(record: SnapshotRecord, props: Any, output: str) -> SnapshotCheck:
        """Compare serialized state with a stored record; output takes priority."""
        if record.output != output:
            return SnapshotCheck(OUTPUT_MISMATCH, False, char_diff(record.output, output))
        if not _same_props(record.props, props):
            return SnapshotCheck(PROPS_MISMATCH, False, props_diff(record.props, props))
        return SnapshotCheck(MATCH, True)

    async def check(self, snapshot_id: str, props: Any, output: str) -> SnapshotCheck:
        """Run the whole load/compare/prompt/save workflow for one snapshot.

        Args:
            snapshot_id: Stable identifier (normalized by the store).
            props: Serialized props.
            output: Normalized output.

        Returns:
            SnapshotCheck: The final state after any accept.
        """
        record = self.load(snapshot_id)
        if record is None:
            return self._save_new(snapshot_id, props, output)

        status = self.compare(record, props, output)
        if status.passed:
            return status

        choice = await self.prompt(snapshot_id, status)
        if choice not in (SnapshotChoice.ACCEPT, SnapshotChoice.ACCEPT_ALL):
            return status

        if error := self.save(snapshot_id, props, output):
            return SnapshotCheck(SAVE_FAILED, "warn", error)
        saved = self.load(snapshot_id)
        if saved is None:
            return status
        return self.compare(saved, props, output)

    def _save_new(self, snapshot_id: str, props: Any, output: str) -> SnapshotCheck:
        if error := self.save(snapshot_id, props, output):
            return SnapshotCheck(SAVE_FAILED, "warn", error)
        return SnapshotCheck(NEW_SNAPSHOT, True)

    async def prompt(self, snapshot_id: str, status: SnapshotCheck) -> SnapshotChoice:
        """Decide what to do about a mismatch.

        Accept-all answers without asking. Outside interactive mode, after a
        cancel, or without a prompter, the mismatch is rejected.
        """
        if self.accept_all:
            return SnapshotChoice.ACCEPT
        if not self.interactive or self.cancelled or self.prompter is None:
            return SnapshotChoice.REJECT

        async with self._prompt_lock:
            choice = await self.prompter.choose(snapshot_id, status.detail or "")

        match choice:
            case SnapshotChoice.ACCEPT_ALL:
                self.accept_all = True
            case SnapshotChoice.CANCEL:
                self.cancelled = True
            case _:
                pass
        return choice


def _render(render: Any, props: Any) -> Any:
    if not callable(render):
        return render
    try:
        takes_props = bool(inspect.signature(render).parameters)
    except (TypeError, ValueError):
        takes_props = True
    return render(props) if takes_props else render()


class SnapshotTest(TestNode):
    """A test node that renders something and checks it against its snapshot.

    ``render`` is called with ``props`` (or with nothing if it takes no
    arguments) and may return an awaitable. A plain value is used as-is.
    """

    def __init__(
        self,
        snapshot_id: str,
        props: Any = None,
        render: Callable[..., Any] | Any = None,
        options: TestOptions | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(snapshot_id, options, self._check, **kwargs)
        self.snapshot_id = snapshot_id
        self.props = props
        self.render = render
        self.output: str | None = None

    def _session(self) -> SnapshotSession:
        session = self.env.snapshots
        if session is None:
            raise ChkError(f"Snapshot test {self.snapshot_id!r} has no snapshot session.")
        return session

    async def _rendered(self) -> str:
        output = _render(self.render, self.props)
        if inspect.isawaitable(output):
            output = await output
        return serialize_output(output)

    async def _check(self, ctx: TestContext) -> None:
        session = self._session()
        self.output = await self._rendered()
        status = await session.check(
            self.snapshot_id, serialize_props(self.props), self.output
        )
        ctx.expect(self.output).process(
            status.key, status.result, self.output, self.snapshot_id, detail=status.detail
        )

    async def save(self, interactive: bool = False) -> SnapshotTest:
        """Store the current rendering as the snapshot, then run the test again."""
        output = await self._rendered()
        if error := self._session().save(
            self.snapshot_id, serialize_props(self.props), output
        ):
            raise ChkError(f"Could not save snapshot {self.snapshot_id!r}: {error}")
        await self.test(interactive)
        return self
