"""Snapshot table.

One row per snapshot, keyed by its normalized identifier. ``props`` holds the
serialized props as JSON (JSONB on Postgres); ``output`` the normalized
rendered output.
"""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, String, Table, Text, func
from sqlalchemy.dialects.postgresql import JSONB

from chk.infrastructure.db.metadata import metadata

__all__ = ["PORTABLE_JSON", "snapshot_table"]

PORTABLE_JSON = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), "postgresql"
)

snapshot_table = Table(
    "chk_snapshot",
    metadata,
    Column(
        "snapshot_id",
        String(512),
        primary_key=True,
        comment="Normalized snapshot identifier ([a-zA-Z0-9/_-.]).",
    ),
    Column("props", PORTABLE_JSON, nullable=True, comment="Serialized props."),
    Column("output", Text, nullable=False, comment="Normalized rendered output."),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        comment="Last time the snapshot was written.",
    ),
    comment="Accepted snapshots. Written on first run and on accept.",
)
