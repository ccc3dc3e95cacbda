"""Alembic entry point. Runs on the connection placed in ``config.attributes``."""

from __future__ import annotations

from alembic import context

from fanout.infrastructure.database.schema import metadata

connection = context.config.attributes["connection"]
context.configure(connection=connection, target_metadata=metadata)
with context.begin_transaction():
    context.run_migrations()
