"""Snapshot store interface definitions."""

from __future__ import annotations

import abc
import re
from dataclasses import dataclass
from typing import Any

__all__ = [
    "CorruptSnapshotError",
    "InvalidSnapshotIdError",
    "SnapshotNotFoundError",
    "SnapshotRecord",
    "SnapshotStore",
    "SnapshotStoreError",
    "SnapshotStoreUnavailableError",
    "normalize_snapshot_id",
]

_UNSAFE = re.compile(r"[^a-zA-Z0-9/_\-.]")


# ============================================================================
# Errors
# ============================================================================


class SnapshotStoreError(Exception):
    """Base class for snapshot store errors."""


class SnapshotNotFoundError(SnapshotStoreError):
    """Raised when deleting or reading a snapshot that does not exist.

    Attributes:
        snapshot_id (str): The normalized identifier.
    """

    def __init__(self, snapshot_id: str):
        super().__init__(f"Snapshot '{snapshot_id}' not found.")
        self.snapshot_id = snapshot_id


class InvalidSnapshotIdError(SnapshotStoreError, ValueError):
    """Raised for identifiers that are empty or would escape the store root.

    Attributes:
        snapshot_id (str): The offending identifier.
    """

    def __init__(self, snapshot_id: str, reason: str):
        super().__init__(f"Invalid snapshot id {snapshot_id!r}: {reason}.")
        self.snapshot_id = snapshot_id


class SnapshotStoreUnavailableError(SnapshotStoreError):
    """Backend unavailable (I/O failure, database unreachable)."""


class CorruptSnapshotError(SnapshotStoreError):
    """Raised when a stored payload cannot be decoded.

    Attributes:
        snapshot_id (str): The normalized identifier.
    """

    def __init__(self, snapshot_id: str, reason: str):
        super().__init__(f"Snapshot '{snapshot_id}' is corrupt: {reason}")
        self.snapshot_id = snapshot_id


# ============================================================================
# Value types
# ============================================================================


def normalize_snapshot_id(snapshot_id: str) -> str:
    """Replace path-unsafe characters and reject ids that escape the root.

    Args:
        snapshot_id (str): Raw identifier, usually derived from a component or
            test name.

    Returns:
        str: Identifier made only of ``[a-zA-Z0-9/_\\-.]``.

    Raises:
        InvalidSnapshotIdError: If the id is empty, absolute, or contains a
            ``..`` segment.
    """
    normalized = _UNSAFE.sub("_", snapshot_id.strip())
    if not normalized:
        raise InvalidSnapshotIdError(snapshot_id, "empty")
    if normalized.startswith("/"):
        raise InvalidSnapshotIdError(snapshot_id, "absolute path")
    if any(part in ("", "..") for part in normalized.split("/")):
        raise InvalidSnapshotIdError(snapshot_id, "empty or '..' path segment")
    return normalized


@dataclass(frozen=True)
class SnapshotRecord:
    """A persisted reference copy.

    Attributes:
        props: JSON-safe serialized props.
        output: Whitespace-normalized rendered output.
    """

    props: Any
    output: str

    def to_dict(self) -> dict[str, Any]:
        return {"props": self.props, "output": self.output}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotRecord:
        """Build a record from its stored form.

        Raises:
            KeyError: If ``output`` is missing.
        """
        return cls(props=data.get("props"), output=str(data["output"]))


# ============================================================================
# Port
# ============================================================================


class SnapshotStore(abc.ABC):
    """Abstract base class for snapshot persistence.

    Implementations receive normalized identifiers and must be safe to call from
    concurrently running test nodes on one event loop.
    """

    # --- Core Operations ---

    @abc.abstractmethod
    def load(self, snapshot_id: str) -> SnapshotRecord | None:
        """Return the stored record, or None when there is none.

        Raises:
            CorruptSnapshotError: If the stored payload cannot be decoded.
            SnapshotStoreUnavailableError: If the backend cannot be read.
        """

    @abc.abstractmethod
    def save(self, snapshot_id: str, record: SnapshotRecord) -> None:
        """Create or overwrite the record for *snapshot_id*.

        Raises:
            SnapshotStoreUnavailableError: If the backend cannot be written.
        """

    @abc.abstractmethod
    def delete(self, snapshot_id: str) -> None:
        """Remove a record.

        Raises:
            SnapshotNotFoundError: If there is nothing to delete.
        """

    # --- Convenience Methods ---

    @abc.abstractmethod
    def list_ids(self) -> list[str]:
        """All stored identifiers, sorted."""

    def exists(self, snapshot_id: str) -> bool:
        """Check whether a record is stored under *snapshot_id*."""
        return self.load(snapshot_id) is not None
