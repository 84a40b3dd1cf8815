"""Global pytest fixtures for chk."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from chk.adapters.snapshot_store.memory import MemorySnapshotStore
from chk.domain.automock import module_mocks
from chk.domain.callsite import fixed_call_site
from chk.domain.node import TestEnvironment
from chk.entrypoints.api import set_runner
from chk.service_layer.snapshots import SnapshotSession

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


pytest_plugins = [
    "tests.fixtures.sqlite",
]


# Helper to route to an existing engine fixture by name
@pytest.fixture
def engine(request: pytest.FixtureRequest) -> Engine:
    """Indirection fixture to parametrize over engine-providing fixtures.

    Example:
        ```py
        @pytest.mark.parametrize("engine", ["sqlite_engine_memory", "sqlite_engine_file"], indirect=True)
        def test_something(engine): ...
        ```
    """
    return request.getfixturevalue(request.param)


@pytest.fixture
def snapshot_store() -> MemorySnapshotStore:
    """Fresh in-memory snapshot store."""
    return MemorySnapshotStore()


@pytest.fixture
def snapshot_session(snapshot_store: MemorySnapshotStore) -> SnapshotSession:
    """Snapshot session over the in-memory store, without a prompter."""
    return SnapshotSession(snapshot_store)


@pytest.fixture
def env(snapshot_session: SnapshotSession) -> TestEnvironment:
    """Test environment with a fixed call site so locations are predictable."""
    return TestEnvironment(
        snapshots=snapshot_session, capture=fixed_call_site("checks.py", 7)
    )


@pytest.fixture(autouse=True)
def _isolate_globals() -> Iterator[None]:
    """Reset the default runner and registered module mocks around every test."""
    previous = set_runner(None)
    try:
        yield
    finally:
        set_runner(previous)
        module_mocks.clear()
