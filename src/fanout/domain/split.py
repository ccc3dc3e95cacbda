"""Equal-split arithmetic over value bundles.

Each denomination is divided by the number of parts with floor division;
every part receives the same bundle. The remainder is not distributed,
not rounded-robin, and not carried to a later deposit.

INVARIANT: ``sum(shares) + remainder == bundle`` per coin.
"""

from __future__ import annotations

from fanout.domain.bundle import Coin, ValueBundle
from fanout.domain.errors import InternalInvariant


def _check_parts(parts: int) -> None:
    if parts <= 0:
        raise InternalInvariant(
            f"Cannot split a bundle into {parts} parts",
            parts=parts,
        )


def split_bundle(bundle: ValueBundle, parts: int) -> list[ValueBundle]:
    """Partition *bundle* into *parts* identical shares.

    Coin order within each share follows *bundle*. Zero-amount coins are
    kept so every share lines up with the input.

    Raises:
        InternalInvariant: If *parts* is not positive. Callers reject empty
            recipient sets before splitting, so this signals a bug.
    """
    _check_parts(parts)
    share: ValueBundle = tuple(
        Coin(denom=coin.denom, amount=coin.amount // parts) for coin in bundle
    )
    return [share for _ in range(parts)]


def remainder(bundle: ValueBundle, parts: int) -> ValueBundle:
    """Amounts left undistributed by :func:`split_bundle`, one coin per input coin."""
    _check_parts(parts)
    return tuple(Coin(denom=coin.denom, amount=coin.amount % parts) for coin in bundle)
