"""Database engine factory for the SQL snapshot store.

SQLite engines get connection PRAGMAs so several test nodes can read and
write snapshots without tripping over each other:

- ``journal_mode=WAL``: readers do not block the writer
- ``busy_timeout``: wait for a lock instead of failing immediately
- ``synchronous=NORMAL``: balanced durability
- ``temp_store=MEMORY``: keep temp tables off disk

In-memory SQLite URLs share one connection (``StaticPool``) so the schema
created at bootstrap is visible to every later connection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
BUSY_TIMEOUT_MS = 5000


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string is a SQLite URL."""
    return make_url(str(url)).get_backend_name() in SQLITE_NAMES


def is_memory_sqlite(url: str | URL) -> bool:
    """Return True for ``sqlite://`` and ``sqlite:///:memory:``."""
    u = make_url(str(url))
    return is_sqlite(u) and u.database in (None, "", ":memory:")


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a configured SQLAlchemy Engine.

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Engine with SQLite PRAGMAs installed when applicable.
    """
    kwargs: dict[str, Any] = {}
    if is_memory_sqlite(url):
        kwargs = {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    engine = create_engine(url, echo=echo, **kwargs)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS};")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute("PRAGMA temp_store=MEMORY;")
            cur.close()

    return engine
