"""SQLAlchemy-backed snapshot store.

Persists snapshots in the ``chk_snapshot`` table (see ``schema``). Each call
runs in its own transaction on the engine it was built with. Saves are
upserts: ``INSERT ... ON CONFLICT DO UPDATE`` on SQLite and Postgres, a
delete-then-insert inside one transaction elsewhere.

Database errors (``DBAPIError`` and subclasses) are mapped to
:class:`~chk.interfaces.snapshot_store.SnapshotStoreUnavailableError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError

from chk.interfaces.snapshot_store import (
    SnapshotNotFoundError,
    SnapshotRecord,
    SnapshotStore,
    SnapshotStoreUnavailableError,
    normalize_snapshot_id,
)

from .schema import snapshot_table

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

__all__ = ["SqlAlchemySnapshotStore", "create_schema"]


def create_schema(engine: Engine) -> None:
    """Create the snapshot table if it does not exist."""
    try:
        snapshot_table.metadata.create_all(engine, tables=[snapshot_table])
    except DBAPIError as e:
        raise SnapshotStoreUnavailableError(str(e)) from e


class SqlAlchemySnapshotStore(SnapshotStore):
    """SnapshotStore implementation for SQLite and Postgres (or any SQL backend)."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.dialect = engine.dialect.name

    # --- Core Operations ---

    def load(self, snapshot_id: str) -> SnapshotRecord | None:
        key = normalize_snapshot_id(snapshot_id)
        stmt = select(snapshot_table.c.props, snapshot_table.c.output).where(
            snapshot_table.c.snapshot_id == key
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).fetchone()
        except DBAPIError as e:
            raise SnapshotStoreUnavailableError(str(e)) from e
        if row is None:
            return None
        return SnapshotRecord(props=row.props, output=row.output)

    def save(self, snapshot_id: str, record: SnapshotRecord) -> None:
        key = normalize_snapshot_id(snapshot_id)
        values = {"snapshot_id": key, "props": record.props, "output": record.output}
        try:
            with self.engine.begin() as conn:
                self._upsert(conn, values)
        except DBAPIError as e:
            raise SnapshotStoreUnavailableError(str(e)) from e
        logger.debug("Wrote snapshot %s to %s", key, self.dialect)

    def delete(self, snapshot_id: str) -> None:
        key = normalize_snapshot_id(snapshot_id)
        stmt = delete(snapshot_table).where(snapshot_table.c.snapshot_id == key)
        try:
            with self.engine.begin() as conn:
                deleted = conn.execute(stmt).rowcount
        except DBAPIError as e:
            raise SnapshotStoreUnavailableError(str(e)) from e
        if not deleted:
            raise SnapshotNotFoundError(key)

    # --- Convenience Methods ---

    def list_ids(self) -> list[str]:
        stmt = select(snapshot_table.c.snapshot_id).order_by(
            snapshot_table.c.snapshot_id.asc()
        )
        try:
            with self.engine.connect() as conn:
                return list(conn.execute(stmt).scalars())
        except DBAPIError as e:
            raise SnapshotStoreUnavailableError(str(e)) from e

    def exists(self, snapshot_id: str) -> bool:
        key = normalize_snapshot_id(snapshot_id)
        stmt = select(func.count()).where(snapshot_table.c.snapshot_id == key)
        try:
            with self.engine.connect() as conn:
                return bool(conn.execute(stmt).scalar_one())
        except DBAPIError as e:
            raise SnapshotStoreUnavailableError(str(e)) from e

    # --- dialect-specific upsert ---

    def _upsert(self, conn: Connection, values: dict) -> None:
        updates = {
            "props": values["props"],
            "output": values["output"],
            "updated_at": func.current_timestamp(),
        }
        if self.dialect == "postgresql":
            stmt = pg_insert(snapshot_table).values(**values)
            conn.execute(
                stmt.on_conflict_do_update(
                    index_elements=[snapshot_table.c.snapshot_id], set_=updates
                )
            )
            return
        if self.dialect == "sqlite":
            stmt = sqlite_insert(snapshot_table).values(**values)
            conn.execute(
                stmt.on_conflict_do_update(
                    index_elements=[snapshot_table.c.snapshot_id], set_=updates
                )
            )
            return
        conn.execute(
            delete(snapshot_table).where(
                snapshot_table.c.snapshot_id == values["snapshot_id"]
            )
        )
        conn.execute(insert(snapshot_table).values(**values))
