"""Local filesystem snapshot store.

One pretty-printed JSON file per snapshot at
``<root>/<normalized id>.snapshot.json``. Slashes in the id become
subdirectories. Writes go to a temporary file in the target directory and are
moved into place with ``os.replace``, so a reader never sees a half-written
snapshot.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from chk.domain.serialization import dumps
from chk.interfaces.snapshot_store import (
    CorruptSnapshotError,
    SnapshotNotFoundError,
    SnapshotRecord,
    SnapshotStore,
    SnapshotStoreUnavailableError,
    normalize_snapshot_id,
)

logger = logging.getLogger(__name__)

__all__ = ["LocalSnapshotStore"]

SUFFIX = ".snapshot.json"


class LocalSnapshotStore(SnapshotStore):
    """Snapshot store that keeps JSON files under a root directory."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    # --- Core Operations ---

    def load(self, snapshot_id: str) -> SnapshotRecord | None:
        key = normalize_snapshot_id(snapshot_id)
        path = self._path_for(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SnapshotStoreUnavailableError(str(e)) from e

        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")
            return SnapshotRecord.from_dict(data)
        except (ValueError, KeyError, TypeError) as e:
            raise CorruptSnapshotError(key, str(e)) from e

    def save(self, snapshot_id: str, record: SnapshotRecord) -> None:
        key = normalize_snapshot_id(snapshot_id)
        dest = self._path_for(key)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            # disable mutmut: delete=None is falsy as well
            with tempfile.NamedTemporaryFile(  # pragma: no mutate
                "w", dir=dest.parent, delete=False, encoding="utf-8", suffix=".tmp"
            ) as tmp:
                tmp.write(dumps(record.to_dict()))
                tmp.write("\n")
            os.replace(tmp.name, dest)
        except OSError as e:
            raise SnapshotStoreUnavailableError(str(e)) from e
        logger.debug("Wrote snapshot %s to %s", key, dest)

    def delete(self, snapshot_id: str) -> None:
        key = normalize_snapshot_id(snapshot_id)
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            raise SnapshotNotFoundError(key) from None

    # --- Convenience Methods ---

    def list_ids(self) -> list[str]:
        return sorted(
            path.relative_to(self._root).as_posix()[: -len(SUFFIX)]
            for path in self._root.rglob(f"*{SUFFIX}")
            if path.is_file()
        )

    def exists(self, snapshot_id: str) -> bool:
        return self._path_for(normalize_snapshot_id(snapshot_id)).is_file()

    # --- Internal Helpers ---

    def _path_for(self, key: str) -> Path:
        return self._root / f"{key}{SUFFIX}"
