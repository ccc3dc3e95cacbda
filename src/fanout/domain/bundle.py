"""Coins and value bundles.

A value bundle is an ordered tuple of :class:`Coin`. Two coins in the same
bundle may share a denomination; nothing here merges them implicitly.
Amounts are plain Python integers, so there is no overflow ceiling.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from fanout.domain.errors import InvalidBundle

DENOM_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._-]{2,127}$")

# "1000token", "5 uatom", "12ibc/27394FB0"
_COIN_RE = re.compile(r"^\s*(\d+)\s*([a-zA-Z][a-zA-Z0-9/:._-]*)\s*$")


class Coin(BaseModel):
    """A single (denomination, amount) pair."""

    model_config = {"frozen": True}

    denom: str
    amount: int = Field(ge=0)

    @field_validator("denom")
    @classmethod
    def _check_denom(cls, value: str) -> str:
        if DENOM_PATTERN.match(value) is None:
            msg = f"Invalid denomination: {value!r}"
            raise ValueError(msg)
        return value

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


ValueBundle = tuple[Coin, ...]
Receipts = list[ValueBundle]


def make_bundle(coins: Iterable[Coin | dict[str, Any]]) -> ValueBundle:
    """Build a validated, non-empty bundle from coins or coin dicts.

    Raises:
        InvalidBundle: If the bundle is empty or any coin is malformed.
    """
    try:
        bundle = tuple(c if isinstance(c, Coin) else Coin.model_validate(c) for c in coins)
    except ValidationError as exc:
        errors = "; ".join(str(e["msg"]) for e in exc.errors())
        raise InvalidBundle(f"Invalid coin: {errors}") from exc
    if not bundle:
        raise InvalidBundle("Bundle must contain at least one coin")
    return bundle


def parse_coins(text: str) -> ValueBundle:
    """Parse a comma-separated coin string such as ``"1000token,5uatom"``.

    Raises:
        InvalidBundle: On any unparseable element or an empty string.
    """
    coins: list[dict[str, Any]] = []
    for part in text.split(","):
        if not part.strip():
            continue
        m = _COIN_RE.match(part)
        if m is None:
            raise InvalidBundle(f"Cannot parse coin: {part.strip()!r}", coin=part.strip())
        coins.append({"amount": int(m.group(1)), "denom": m.group(2)})
    return make_bundle(coins)


def bundle_to_json(bundle: Sequence[Coin]) -> list[dict[str, Any]]:
    """Serialize a bundle to a JSON-compatible list."""
    return [c.model_dump(mode="json") for c in bundle]


def bundle_from_json(raw: Sequence[dict[str, Any]]) -> ValueBundle:
    """Deserialize a stored bundle. Empty stored bundles are allowed."""
    return tuple(Coin.model_validate(c) for c in raw)


def totals(receipts: Iterable[Sequence[Coin]]) -> dict[str, int]:
    """Sum amounts per denomination across every coin of every bundle.

    Denominations appear in first-seen order.
    """
    result: dict[str, int] = {}
    for bundle in receipts:
        for coin in bundle:
            result[coin.denom] = result.get(coin.denom, 0) + coin.amount
    return result
