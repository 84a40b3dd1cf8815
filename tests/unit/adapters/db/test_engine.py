"""Unit tests for the database engine helpers.

These tests cover:
- Detection of SQLite, in-memory SQLite and non-SQLite URLs.
- Creation of a SQLite engine for a given URL.
- Application of SQLite PRAGMAs on connect.
- Sharing of the single in-memory connection.
"""

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from chk.infrastructure.db.engine import is_memory_sqlite, is_sqlite

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_is_sqlite_true_for_sqlite_url():
    """is_sqlite() should return True for SQLite URLs."""
    assert is_sqlite("sqlite:///:memory:")
    assert is_sqlite(make_url("sqlite+pysqlite:///file.db"))


def test_is_sqlite_false_for_postgres_url():
    """is_sqlite() should return False for non-SQLite URLs (e.g., Postgres)."""
    assert not is_sqlite("postgresql://u:p@localhost/db")
    assert not is_sqlite(make_url("postgresql+psycopg://u:p@localhost/db"))


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("sqlite://", True),
        ("sqlite:///:memory:", True),
        ("sqlite+pysqlite:///:memory:", True),
        ("sqlite:///snapshots.db", False),
        ("postgresql://u:p@localhost/db", False),
    ],
)
def test_is_memory_sqlite(url: str, expected: bool):
    assert is_memory_sqlite(url) is expected


def test_make_engine_creates_sqlite(sqlite_engine_file: "Engine"):
    """make_engine() should create a working SQLite engine from a given URL."""
    engine = sqlite_engine_file  # engine is created in fixture using make_engine()
    assert engine.url.database is not None
    assert engine.url.database.endswith("test.db")


def test_sqlite_pragmas_applied(sqlite_engine_file: "Engine"):
    """SQLite engines created by make_engine() should apply expected PRAGMAs."""
    engine = sqlite_engine_file
    with engine.connect() as cxn:
        jm = cxn.exec_driver_sql("PRAGMA journal_mode;").scalar()
        busy = cxn.exec_driver_sql("PRAGMA busy_timeout;").scalar()
        sync = cxn.exec_driver_sql("PRAGMA synchronous;").scalar()
        tmp = cxn.exec_driver_sql("PRAGMA temp_store;").scalar()
    assert jm is not None
    assert jm.lower() == "wal"
    assert busy == 5000
    assert sync == 1
    assert tmp == 2


def test_memory_engine_shares_one_connection(sqlite_engine_memory: "Engine"):
    """The schema created at startup must be visible to later connections."""
    assert isinstance(sqlite_engine_memory.pool, StaticPool)
    with sqlite_engine_memory.connect():
        assert "chk_snapshot" in inspect(sqlite_engine_memory).get_table_names()
