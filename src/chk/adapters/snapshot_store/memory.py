"""In-memory snapshot store.

Records live in a dict guarded by an ``RLock``; nothing survives the process.
Meant for tests and for runs where persistence is not wanted. Records are
deep-copied on the way in and out so callers cannot mutate stored props.
"""

from __future__ import annotations

import copy
import threading

from chk.interfaces.snapshot_store import (
    SnapshotNotFoundError,
    SnapshotRecord,
    SnapshotStore,
    normalize_snapshot_id,
)

__all__ = ["MemorySnapshotStore"]


class MemorySnapshotStore(SnapshotStore):
    """Dict-backed :class:`SnapshotStore`."""

    def __init__(self, records: dict[str, SnapshotRecord] | None = None) -> None:
        self._records: dict[str, SnapshotRecord] = {}
        self._lock = threading.RLock()
        for snapshot_id, record in (records or {}).items():
            self.save(snapshot_id, record)

    # --- Core Operations ---

    def load(self, snapshot_id: str) -> SnapshotRecord | None:
        key = normalize_snapshot_id(snapshot_id)
        with self._lock:
            record = self._records.get(key)
        return copy.deepcopy(record)

    def save(self, snapshot_id: str, record: SnapshotRecord) -> None:
        key = normalize_snapshot_id(snapshot_id)
        with self._lock:
            self._records[key] = copy.deepcopy(record)

    def delete(self, snapshot_id: str) -> None:
        key = normalize_snapshot_id(snapshot_id)
        with self._lock:
            if key not in self._records:
                raise SnapshotNotFoundError(key)
            del self._records[key]

    # --- Convenience Methods ---

    def list_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._records)

    def exists(self, snapshot_id: str) -> bool:
        key = normalize_snapshot_id(snapshot_id)
        with self._lock:
            return key in self._records
