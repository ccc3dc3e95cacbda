"""Tests for shared service helpers."""

import re

from fanout.domain.bundle import parse_coins
from fanout.services._helpers import now_compact, receipts_payload


class TestTimestamps:
    def test_now_compact_format(self) -> None:
        assert re.fullmatch(r"\d{8}T\d{6}", now_compact())


class TestReceiptsPayload:
    def test_shape(self) -> None:
        payload = receipts_payload([parse_coins("5token"), parse_coins("3token,1uatom")])
        assert payload["count"] == 2
        assert payload["totals"] == {"token": 8, "uatom": 1}
        assert payload["receipts"][0] == [{"denom": "token", "amount": 5}]

    def test_empty(self) -> None:
        assert receipts_payload([]) == {"receipts": [], "count": 0, "totals": {}}
