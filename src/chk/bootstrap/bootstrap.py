"""Wire a runner to its snapshot store, prompter and reporter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chk.adapters.snapshot_store.local import LocalSnapshotStore
from chk.adapters.snapshot_store.sqlalchemy_store import (
    SqlAlchemySnapshotStore,
    create_schema,
)
from chk.config import Settings
from chk.domain.node import TestEnvironment
from chk.infrastructure.db.engine import make_engine
from chk.service_layer.runner import Runner
from chk.service_layer.snapshots import SnapshotSession

if TYPE_CHECKING:
    from chk.interfaces.prompter import Prompter
    from chk.interfaces.reporter import Reporter
    from chk.interfaces.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring."""

    runner: Runner
    store: SnapshotStore
    settings: Settings


def build_snapshot_store(settings: Settings) -> SnapshotStore:
    """SQL store when ``snapshot_url`` is set, JSON files under ``snapshot_dir`` otherwise."""
    if settings.snapshot_url:
        engine = make_engine(settings.snapshot_url)
        create_schema(engine)
        logger.debug("Using SQL snapshot store (%s)", engine.dialect.name)
        return SqlAlchemySnapshotStore(engine)
    logger.debug("Using local snapshot store at %s", settings.snapshot_dir)
    return LocalSnapshotStore(settings.snapshot_dir)


def build_runner(
    store: SnapshotStore,
    settings: Settings,
    *,
    reporter: Reporter | None = None,
    prompter: Prompter | None = None,
) -> Runner:
    """Build a runner whose environment owns a fresh snapshot session."""
    env = TestEnvironment(
        snapshots=SnapshotSession(store, prompter),
        timeout=settings.timeout,
    )
    return Runner(env, reporter)


def bootstrap(
    settings: Settings | None = None,
    *,
    store: SnapshotStore | None = None,
    reporter: Reporter | None = None,
    prompter: Prompter | None = None,
) -> AppContainer:
    """Build everything from *settings* (environment by default)."""
    settings = settings if settings is not None else Settings.from_env()
    store = store if store is not None else build_snapshot_store(settings)
    runner = build_runner(store, settings, reporter=reporter, prompter=prompter)
    return AppContainer(runner=runner, store=store, settings=settings)
