"""QueryService — read-only views over the registry.

Per-identity queries share one policy: an identity without an entry in the
queried set yields ``NOT_FOUND``. This holds for depositors as well, so a
caller never has to tell "no deposits yet" apart from "unknown identity"
by inspecting an empty history.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from fanout.domain.errors import RegistryError
from fanout.services._helpers import receipts_payload
from fanout.services.base import BaseService
from fanout.services.contracts import HistoryData, MembersData, StateData, dump_validated
from fanout.services.result import ServiceResult
from fanout.services.telemetry import traced

if TYPE_CHECKING:
    from fanout.domain.bundle import Receipts
    from fanout.infrastructure.registry import RegistryTransaction


class QueryService(BaseService):
    """State, receipt-history and membership queries."""

    @traced
    def get_state(self) -> ServiceResult:
        op = "get_state"
        try:
            with self._registry.reader() as view:
                state = view.load_state()
        except RegistryError as exc:
            return ServiceResult.failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(StateData, state.model_dump()),
        )

    # ------------------------------------------------------------------
    # Per-identity receipt histories
    # ------------------------------------------------------------------

    @traced
    def get_depositor(self, depositor: str) -> ServiceResult:
        """Every deposit made by *depositor*, oldest first."""
        return self._history(
            "get_depositor", depositor, "depositor", lambda v, i: v.depositors.history(i)
        )

    @traced
    def get_recipient(self, recipient: str) -> ServiceResult:
        """Receipts of a currently enrolled recipient, oldest first."""
        return self._history(
            "get_recipient", recipient, "active", lambda v, i: v.recipients.history(i)
        )

    @traced
    def get_removed_recipient(self, recipient: str) -> ServiceResult:
        """Receipts a removed recipient held at its latest removal."""
        return self._history(
            "get_removed_recipient", recipient, "removed", lambda v, i: v.removed.history(i)
        )

    def _history(
        self,
        op: str,
        identity: str,
        status: str,
        load: Callable[[RegistryTransaction, str], Receipts],
    ) -> ServiceResult:
        try:
            identity = self._registry.validate_identity(identity)
            with self._registry.reader() as view:
                view.load_state()
                receipts = load(view, identity)
        except RegistryError as exc:
            return ServiceResult.failure(op, exc)
        data = {"identity": identity, "status": status, **receipts_payload(receipts)}
        return ServiceResult(ok=True, op=op, data=dump_validated(HistoryData, data))

    # ------------------------------------------------------------------
    # Membership listings
    # ------------------------------------------------------------------

    @traced
    def list_recipients(self) -> ServiceResult:
        return self._members("list_recipients", lambda v: v.recipients.active_members())

    @traced
    def list_removed_recipients(self) -> ServiceResult:
        return self._members("list_removed_recipients", lambda v: v.removed.members())

    @traced
    def list_depositors(self) -> ServiceResult:
        return self._members("list_depositors", lambda v: v.depositors.members())

    def _members(
        self,
        op: str,
        load: Callable[[RegistryTransaction], list[str]],
    ) -> ServiceResult:
        try:
            with self._registry.reader() as view:
                view.load_state()
                items = load(view)
        except RegistryError as exc:
            return ServiceResult.failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(MembersData, {"count": len(items), "items": items}),
        )
