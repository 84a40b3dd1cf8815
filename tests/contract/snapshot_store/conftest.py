"""Pytest fixtures for snapshot store contract tests.

Provided fixtures
-----------------
- **store**: Parametrized backend factory that returns a **fresh**
  `SnapshotStore` per test. Supports `"memory"`, `"local"` (JSON files under
  `tmp_path`) and `"sqlite"` (the SQLAlchemy store on in-memory SQLite).

- **record**: Small, deterministic record useful for quick round-trips.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from chk.adapters.snapshot_store.local import LocalSnapshotStore
from chk.adapters.snapshot_store.memory import MemorySnapshotStore
from chk.adapters.snapshot_store.sqlalchemy_store import SqlAlchemySnapshotStore
from chk.interfaces.snapshot_store import SnapshotRecord

if TYPE_CHECKING:
    from chk.interfaces.snapshot_store import SnapshotStore


@pytest.fixture(params=["memory", "local", "sqlite"])
def store(request: pytest.FixtureRequest) -> SnapshotStore:
    """Return a fresh snapshot store for the requested backend.

    Current params:
      - `"memory"` → `MemorySnapshotStore`
      - `"local"` → `LocalSnapshotStore` rooted in a per-test temp directory
      - `"sqlite"` → `SqlAlchemySnapshotStore` over `sqlite_engine_memory`
    """

    match request.param:
        case "memory":
            return MemorySnapshotStore()
        case "local":
            tmp_path = request.getfixturevalue("tmp_path")
            return LocalSnapshotStore(tmp_path / "snapshots")
        case "sqlite":
            return SqlAlchemySnapshotStore(request.getfixturevalue("sqlite_engine_memory"))
        case _:
            raise ValueError(f"unknown store type: {request.param}")


@pytest.fixture
def record() -> SnapshotRecord:
    return SnapshotRecord(
        props={"label": "Go", "size": 2, "tags": ["a", "b"], "extra": None},
        output="<button>Go</button>",
    )
