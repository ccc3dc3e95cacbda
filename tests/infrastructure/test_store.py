"""Tests for the SQL-backed receipt map."""

from sqlalchemy import select
from sqlalchemy.engine import Engine

from fanout.domain.bundle import parse_coins
from fanout.infrastructure.database.schema import recipients
from fanout.infrastructure.store import SqlReceiptMap, decode_receipts, encode_receipts


class TestCodec:
    def test_encode_compact(self) -> None:
        raw = encode_receipts([parse_coins("5token")])
        assert raw == '[[{"denom":"token","amount":5}]]'

    def test_decode_inverse(self) -> None:
        receipts = [parse_coins("5token,1uatom"), ()]
        assert decode_receipts(encode_receipts(receipts)) == receipts


class TestSqlReceiptMap:
    def test_get_missing(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert SqlReceiptMap(conn, recipients).get("alice") is None

    def test_put_insert_then_update(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            store = SqlReceiptMap(conn, recipients)
            store.put("alice", [])
            store.put("alice", [parse_coins("3token")])
            assert store.get("alice") == [parse_coins("3token")]
            rows = conn.execute(select(recipients.c.key)).fetchall()
        assert len(rows) == 1

    def test_get_returns_fresh_list(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            store = SqlReceiptMap(conn, recipients)
            store.put("alice", [])
            first = store.get("alice")
            assert first is not None
            first.append(parse_coins("1token"))
            assert store.get("alice") == []

    def test_has_and_delete(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            store = SqlReceiptMap(conn, recipients)
            store.put("alice", [])
            assert store.has("alice")
            store.delete("alice")
            assert not store.has("alice")

    def test_keys_sorted(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            store = SqlReceiptMap(conn, recipients)
            for key in ("carol", "alice", "bob"):
                store.put(key, [])
            assert store.keys() == ["alice", "bob", "carol"]
