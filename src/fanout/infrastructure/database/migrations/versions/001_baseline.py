"""Baseline schema — registry state, receipt maps, and the event WAL.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-17

Databases created by ``fanout init`` are stamped at this revision without
running it; a pre-Alembic database gets stamped by ``fanout upgrade``.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None

_RECEIPT_TABLES = ("recipients", "removed_recipients", "depositors")


def upgrade() -> None:
    op.create_table(
        "registry_state",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("owner", sa.Text, nullable=False),
        sa.Column("self_enrollment_allowed", sa.Integer, nullable=False),
        sa.Column("created", sa.Text, nullable=False),
    )

    for name in _RECEIPT_TABLES:
        op.create_table(
            name,
            sa.Column("key", sa.Text, primary_key=True),
            sa.Column("receipts", sa.Text, nullable=False),
            sa.Column("updated", sa.Text, nullable=False),
        )

    op.create_table(
        "event_wal",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("hook_name", sa.Text, nullable=False),
        sa.Column("payload", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False),
        sa.Column("error", sa.Text),
        sa.Column("retries", sa.Integer, server_default="0"),
        sa.Column("created", sa.Text, nullable=False),
        sa.Column("completed", sa.Text),
    )


def downgrade() -> None:
    op.drop_table("event_wal")
    for name in reversed(_RECEIPT_TABLES):
        op.drop_table(name)
    op.drop_table("registry_state")
