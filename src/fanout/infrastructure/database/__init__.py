"""SQLite database engine and schema via SQLAlchemy Core."""

from fanout.infrastructure.database.engine import create_db_engine, db_path_for, init_database
from fanout.infrastructure.database.schema import (
    depositors,
    event_wal,
    metadata,
    recipients,
    registry_state,
    removed_recipients,
)

__all__ = [
    "create_db_engine",
    "db_path_for",
    "depositors",
    "event_wal",
    "init_database",
    "metadata",
    "recipients",
    "registry_state",
    "removed_recipients",
]
