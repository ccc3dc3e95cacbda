"""SQLAlchemy Core table definitions for the fanout database.

The three receipt tables share one shape (``key`` -> JSON receipt list) so
a single :class:`~fanout.infrastructure.store.SqlReceiptMap` serves all of
them. ``key`` uses SQLite's default BINARY collation, so ``ORDER BY key``
is ascending by UTF-8 bytes.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()


def now_iso() -> str:
    """UTC timestamp in the ISO 8601 form stored in every timestamp column."""
    return datetime.now(UTC).isoformat()


registry_state = Table(
    "registry_state",
    metadata,
    Column("id", Integer, primary_key=True),  # always 1
    Column("owner", Text, nullable=False),
    Column("self_enrollment_allowed", Integer, nullable=False),
    Column("created", Text, nullable=False),
)


def _receipt_table(name: str) -> Table:
    return Table(
        name,
        metadata,
        Column("key", Text, primary_key=True),
        Column("receipts", Text, nullable=False),  # JSON array of bundles
        Column("updated", Text, nullable=False),
    )


recipients = _receipt_table("recipients")
removed_recipients = _receipt_table("removed_recipients")
depositors = _receipt_table("depositors")

event_wal = Table(
    "event_wal",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hook_name", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False),
    Column("error", Text),
    Column("retries", Integer, default=0, server_default="0"),
    Column("created", Text, nullable=False),
    Column("completed", Text),
)
