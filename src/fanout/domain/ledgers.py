"""Receipt ledgers — active recipients, removed recipients, depositors.

All three are thin rule layers over a :class:`KeyValueMap` of
identity -> append-only receipt list, so the registry logic does not
depend on a particular storage engine. The SQL backend lives in
:mod:`fanout.infrastructure.store`.

INVARIANT: An identity is enrolled iff the active map has a key for it.
INVARIANT: Removed-recipient records are overwritten, never deleted.
"""

from __future__ import annotations

from typing import Protocol

from fanout.domain.bundle import Receipts, ValueBundle
from fanout.domain.errors import AlreadyEnrolled, NotEnrolled, NotFound


class KeyValueMap(Protocol):
    """Key-ordered map from identity to a receipt list."""

    def get(self, key: str) -> Receipts | None: ...

    def put(self, key: str, receipts: Receipts) -> None: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]:
        """All keys, ascending by their UTF-8 byte representation."""
        ...


class RemovedRecipientSet:
    """Receipt history of recipients at the moment they were removed."""

    def __init__(self, store: KeyValueMap) -> None:
        self._store = store

    def record(self, target: str, receipts: Receipts) -> None:
        """Store *receipts* for *target*, replacing any earlier record."""
        self._store.put(target, list(receipts))

    def has(self, target: str) -> bool:
        return self._store.has(target)

    def history(self, target: str) -> Receipts:
        receipts = self._store.get(target)
        if receipts is None:
            raise NotFound(f"{target!r} is not a removed recipient", identity=target)
        return receipts

    def members(self) -> list[str]:
        return self._store.keys()


class RecipientSet:
    """Currently enrolled recipients and what each has received."""

    def __init__(self, store: KeyValueMap, removed: RemovedRecipientSet) -> None:
        self._store = store
        self._removed = removed

    @property
    def removed(self) -> RemovedRecipientSet:
        return self._removed

    def is_active(self, target: str) -> bool:
        return self._store.has(target)

    def enroll(self, target: str) -> Receipts:
        """Enroll *target*, restoring its history from a prior removal if any.

        The removed record stays in place for audit.

        Returns:
            The receipt history the new entry was seeded with.

        Raises:
            AlreadyEnrolled: If *target* is already active.
        """
        if self._store.has(target):
            raise AlreadyEnrolled(f"{target!r} is already enrolled", identity=target)
        seed: Receipts = self._removed.history(target) if self._removed.has(target) else []
        self._store.put(target, seed)
        return seed

    def remove(self, target: str) -> Receipts:
        """Move *target* out of the active set, archiving its history.

        Returns:
            The archived receipt history.

        Raises:
            NotEnrolled: If *target* is not active.
        """
        receipts = self._store.get(target)
        if receipts is None:
            raise NotEnrolled(f"{target!r} is not enrolled", identity=target)
        self._removed.record(target, receipts)
        self._store.delete(target)
        return receipts

    def active_members(self) -> list[str]:
        return self._store.keys()

    def append_receipt(self, target: str, bundle: ValueBundle) -> None:
        receipts = self._store.get(target)
        if receipts is None:
            raise NotEnrolled(f"{target!r} is not enrolled", identity=target)
        receipts.append(bundle)
        self._store.put(target, receipts)

    def history(self, target: str) -> Receipts:
        receipts = self._store.get(target)
        if receipts is None:
            raise NotFound(f"{target!r} is not a recipient", identity=target)
        return receipts


class DepositorLedger:
    """Every deposit made, grouped by depositor."""

    def __init__(self, store: KeyValueMap) -> None:
        self._store = store

    def record_deposit(self, depositor: str, bundle: ValueBundle) -> None:
        receipts = self._store.get(depositor) or []
        receipts.append(bundle)
        self._store.put(depositor, receipts)

    def history(self, depositor: str) -> Receipts:
        receipts = self._store.get(depositor)
        if receipts is None:
            raise NotFound(f"{depositor!r} is not a depositor", identity=depositor)
        return receipts

    def members(self) -> list[str]:
        return self._store.keys()
