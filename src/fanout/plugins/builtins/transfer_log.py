"""Built-in transfer log plugin.

Appends one JSON line per deposit to ``.fanout/transfers.jsonl`` so the
transfer instructions a deposit produced can be replayed or audited by
the host that executes them.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import TYPE_CHECKING, Any

import pluggy

from fanout.infrastructure.database.schema import now_iso

if TYPE_CHECKING:
    from pathlib import Path

hookimpl = pluggy.HookimplMarker("fanout")

logger = logging.getLogger(__name__)


class TransferLogPlugin:
    """Writes deposit transfer instructions to a JSON-lines file."""

    def __init__(self, log_path: Path) -> None:
        self._log_path = log_path
        self._lock = threading.Lock()

    @property
    def log_path(self) -> Path:
        return self._log_path

    @hookimpl
    def post_deposit(
        self,
        depositor: str,
        recipients: list[str],
        count: int,
        transfers: list[dict[str, Any]],
    ) -> None:
        record = {
            "logged": now_iso(),
            "depositor": depositor,
            "count": count,
            "transfers": transfers,
        }
        line = json.dumps(record, sort_keys=True)
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        logger.debug("Logged %d transfers for %s", count, depositor)
