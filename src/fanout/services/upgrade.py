"""UpgradeService — bring the registry database to the newest schema revision.

``apply`` copies the database file into ``.fanout/backups/`` first and then
runs the pending Alembic revisions in one write transaction. A database
with no version row already has every table (the registry creates them on
open), so it is stamped instead of migrated.
"""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

from fanout.infrastructure.database.migrations import (
    current_revision,
    head_revision,
    pending_revisions,
    stamp_head,
    upgrade_head,
)
from fanout.services._helpers import now_compact
from fanout.services.base import BaseService
from fanout.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_OP = "upgrade"


class UpgradeService(BaseService):
    def check_pending(self) -> ServiceResult:
        """Report the database revision, the head revision, and what lies between."""
        with self._registry.reader() as view:
            current = current_revision(view.conn)
            pending = pending_revisions(view.conn)
        return ServiceResult(
            ok=True,
            op=_OP,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head_revision(),
            },
        )

    def apply(self) -> ServiceResult:
        status = self.check_pending().data
        if not status["pending"]:
            return ServiceResult(
                ok=True,
                op=_OP,
                data={
                    "applied_count": 0,
                    "current": status["head"],
                    "message": "Database is already up to date",
                },
            )

        try:
            backup_path = self._backup_db()
        except OSError as exc:
            return ServiceResult(
                ok=False,
                op=_OP,
                error=ServiceError(code="BACKUP_FAILED", message=f"Backup failed: {exc}"),
            )

        try:
            with self._registry.transaction() as txn:
                if status["current"] is None:
                    stamp_head(txn.conn)
                else:
                    upgrade_head(txn.conn)
        except (CommandError, SQLAlchemyError) as exc:
            logger.warning("Migration failed, backup at %s", backup_path, exc_info=True)
            return ServiceResult(
                ok=False,
                op=_OP,
                error=ServiceError(
                    code="MIGRATION_FAILED",
                    message=f"Migration failed: {exc}. Backup at: {backup_path}",
                    detail={"backup_path": str(backup_path)},
                ),
            )

        logger.info("Upgraded registry schema to %s", status["head"])
        return ServiceResult(
            ok=True,
            op=_OP,
            data={
                "applied_count": status["pending_count"],
                "current": status["head"],
                "backup_path": str(backup_path),
            },
        )

    def _backup_db(self) -> Path:
        """Copy the database to ``backups/fanout-<timestamp>.db``, keeping the newest N."""
        backup_dir = self._registry.settings.state_dir / "backups"
        backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path = backup_dir / f"fanout-{now_compact()}.db"
        shutil.copy2(self._registry.db_path, backup_path)

        keep = self._registry.settings.registry.backup_max_count
        for stale in sorted(backup_dir.glob("fanout-*.db"))[:-keep]:
            stale.unlink(missing_ok=True)
        return backup_path
