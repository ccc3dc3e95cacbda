"""Shared service-layer helper functions."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from fanout.domain.bundle import Coin, bundle_to_json, totals


def now_compact() -> str:
    """Current UTC time as compact ISO (YYYYMMDDTHHmmss, for backup filenames)."""
    return datetime.now(UTC).strftime("%Y%m%dT%H%M%S")


def receipts_payload(receipts: Sequence[Sequence[Coin]]) -> dict[str, Any]:
    """Serialize a receipt history with its per-denomination totals."""
    return {
        "receipts": [bundle_to_json(b) for b in receipts],
        "count": len(receipts),
        "totals": totals(receipts),
    }
