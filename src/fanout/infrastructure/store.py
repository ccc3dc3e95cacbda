"""SQL-backed :class:`~fanout.domain.ledgers.KeyValueMap`.

One instance wraps one receipt table on one connection. Receipt lists are
stored as JSON text; every ``get`` returns a freshly decoded list, so
callers may mutate it freely before ``put``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update

from fanout.domain.bundle import Receipts, bundle_from_json, bundle_to_json
from fanout.infrastructure.database.schema import now_iso

if TYPE_CHECKING:
    from sqlalchemy import Connection, Table


def encode_receipts(receipts: Receipts) -> str:
    return json.dumps([bundle_to_json(b) for b in receipts], separators=(",", ":"))


def decode_receipts(raw: str) -> Receipts:
    return [bundle_from_json(b) for b in json.loads(raw)]


class SqlReceiptMap:
    """Identity -> receipt list over a ``(key, receipts, updated)`` table."""

    def __init__(self, conn: Connection, table: Table) -> None:
        self._conn = conn
        self._table = table

    def get(self, key: str) -> Receipts | None:
        raw = self._conn.execute(
            select(self._table.c.receipts).where(self._table.c.key == key)
        ).scalar_one_or_none()
        if raw is None:
            return None
        return decode_receipts(raw)

    def put(self, key: str, receipts: Receipts) -> None:
        payload = encode_receipts(receipts)
        stamp = now_iso()
        if self.has(key):
            self._conn.execute(
                update(self._table)
                .where(self._table.c.key == key)
                .values(receipts=payload, updated=stamp)
            )
        else:
            self._conn.execute(
                insert(self._table).values(key=key, receipts=payload, updated=stamp)
            )

    def has(self, key: str) -> bool:
        row = self._conn.execute(
            select(self._table.c.key).where(self._table.c.key == key)
        ).first()
        return row is not None

    def delete(self, key: str) -> None:
        self._conn.execute(delete(self._table).where(self._table.c.key == key))

    def keys(self) -> list[str]:
        rows = self._conn.execute(select(self._table.c.key).order_by(self._table.c.key))
        return [row.key for row in rows]
