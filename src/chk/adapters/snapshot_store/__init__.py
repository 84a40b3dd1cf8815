"""Snapshot store adapters."""

from .local import LocalSnapshotStore
from .memory import MemorySnapshotStore

__all__ = ["LocalSnapshotStore", "MemorySnapshotStore"]
