"""Alembic migrations for the registry database.

Configured in code; there is no alembic.ini. Every command runs on a
connection handed in by the caller, so a stamp or upgrade shares the
caller's ``BEGIN IMMEDIATE`` transaction.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

if TYPE_CHECKING:
    from sqlalchemy import Connection

_SCRIPTS = Path(__file__).parent


def build_config(conn: Connection) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(_SCRIPTS))
    cfg.attributes["connection"] = conn
    return cfg


def head_revision() -> str | None:
    return ScriptDirectory(str(_SCRIPTS)).get_current_head()


def current_revision(conn: Connection) -> str | None:
    return MigrationContext.configure(conn).get_current_revision()


def pending_revisions(conn: Connection) -> list[dict[str, str]]:
    """Revisions between the database's version and head, newest first."""
    script = ScriptDirectory(str(_SCRIPTS))
    current = current_revision(conn)
    return [
        {"revision": rev.revision, "description": rev.doc or ""}
        for rev in script.iterate_revisions("heads", current)
    ]


def stamp_head(conn: Connection) -> None:
    """Mark the database as current without running any revision."""
    command.stamp(build_config(conn), "head")


def upgrade_head(conn: Connection) -> None:
    command.upgrade(build_config(conn), "head")
