"""Database engine setup for SQLite with WAL mode.

SQLite is the persistence layer: WAL mode for concurrent reads and
ACID transactions for registry integrity. The DB is stored at
{registry_root}/.fanout/fanout.db.

SQLAlchemy Core (not ORM) is used because fanout is a short-lived
CLI process — no benefit from session management or identity maps.

Transactions are opened with ``BEGIN IMMEDIATE`` so the write lock is
taken before the first read. A deposit reads the recipient set and then
writes against it; no other writer may change the set in between.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

from fanout.infrastructure.database.schema import metadata

DB_FILENAME = "fanout.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and immediate transactions."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Let SQLAlchemy emit BEGIN itself (see _begin_immediate).
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def db_path_for(state_dir: Path) -> Path:
    return state_dir / DB_FILENAME


def init_database(state_dir: Path) -> Engine:
    """Initialize the fanout database at ``{state_dir}/fanout.db``.

    Creates the state directory structure and all tables from
    :data:`schema.metadata`. Does not create the registry state row;
    that is :class:`~fanout.services.init.InitService`'s job.

    Idempotent — safe to call on an existing registry.

    Returns the engine ready for use.
    """
    state_dir.mkdir(parents=True, exist_ok=True)
    (state_dir / "backups").mkdir(exist_ok=True)
    (state_dir / "plugins").mkdir(exist_ok=True)

    engine = create_db_engine(db_path_for(state_dir))
    metadata.create_all(engine)
    return engine
