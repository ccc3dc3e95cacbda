"""Lifecycle event delivery to plugins, logged through ``event_wal``.

Each event gets a WAL row before any hook runs. A row moves from
``pending`` to ``completed``, or to ``failed`` and, once it has failed
``max_retries`` times, to ``dead_letter``. :meth:`EventBus.drain` reruns
every ``pending`` or ``failed`` row; the registry drains on close.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from fanout.infrastructure.database.schema import event_wal, now_iso

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from fanout.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

PENDING = "pending"
COMPLETED = "completed"
FAILED = "failed"
DEAD_LETTER = "dead_letter"


class EventBus:
    """Runs plugin hooks for committed registry actions.

    With *sync* the hook runs before :meth:`dispatch` returns (``--sync``);
    otherwise it runs on a worker pool that :meth:`shutdown` joins.
    """

    def __init__(
        self,
        engine: Engine,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_retries: int = 3,
        max_workers: int = 2,
    ) -> None:
        self._engine = engine
        self._pm = plugin_manager
        self._max_retries = max_retries
        self._pool = None if sync else ThreadPoolExecutor(max_workers=max_workers)
        self._inflight: list[Future[str]] = []

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> int:
        """Log the event and run its hook. Returns the WAL row id."""
        with self._engine.begin() as conn:
            event_id = conn.execute(
                insert(event_wal).values(
                    hook_name=hook_name,
                    payload=json.dumps(payload),
                    status=PENDING,
                    retries=0,
                    created=now_iso(),
                )
            ).inserted_primary_key[0]

        if self._pool is None:
            self._deliver(event_id, hook_name, payload)
        else:
            self._inflight.append(self._pool.submit(self._deliver, event_id, hook_name, payload))
        return event_id

    def drain(self) -> list[dict[str, Any]]:
        """Rerun pending and failed events inline, oldest first."""
        self._join()
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(event_wal.c.id, event_wal.c.hook_name, event_wal.c.payload)
                .where(event_wal.c.status.in_([PENDING, FAILED]))
                .order_by(event_wal.c.id)
            ).all()
        return [
            {
                "id": row.id,
                "hook_name": row.hook_name,
                "status": self._deliver(row.id, row.hook_name, json.loads(row.payload)),
            }
            for row in rows
        ]

    def shutdown(self) -> None:
        self._join()
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def _deliver(self, event_id: int, hook_name: str, payload: dict[str, Any]) -> str:
        """Run one hook and record the outcome. Returns the row's new status."""
        hook = getattr(self._pm.hook, hook_name, None)
        try:
            if hook is not None:
                hook(**payload)
        except Exception as exc:
            logger.warning("Plugin hook %s failed for event %d: %s", hook_name, event_id, exc)
            return self._record_failure(event_id, str(exc))

        with self._engine.begin() as conn:
            conn.execute(
                update(event_wal)
                .where(event_wal.c.id == event_id)
                .values(status=COMPLETED, completed=now_iso())
            )
        return COMPLETED

    def _record_failure(self, event_id: int, error: str) -> str:
        with self._engine.begin() as conn:
            attempts = 1 + conn.execute(
                select(event_wal.c.retries).where(event_wal.c.id == event_id)
            ).scalar_one()
            status = DEAD_LETTER if attempts >= self._max_retries else FAILED
            conn.execute(
                update(event_wal)
                .where(event_wal.c.id == event_id)
                .values(
                    status=status,
                    error=error,
                    retries=attempts,
                    completed=now_iso() if status == DEAD_LETTER else None,
                )
            )
        return status

    def _join(self) -> None:
        pending, self._inflight = self._inflight, []
        for future in pending:
            exc = future.exception(timeout=30)
            if exc is not None:
                logger.warning("Event delivery crashed: %s", exc)
