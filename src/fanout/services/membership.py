"""MembershipService — enrolling and removing recipients.

Pipeline: VALIDATE → AUTHORIZE → MUTATE → EVENT → RESPOND

Every check runs before the first write; a rejected action leaves the
registry untouched.
"""

from __future__ import annotations

import logging

from fanout.domain.errors import RegistryError
from fanout.services.base import BaseService
from fanout.services.result import ServiceResult
from fanout.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class MembershipService(BaseService):
    """Enrollment and removal on behalf of an acting identity."""

    @traced
    def enroll(self, actor: str, target: str | None = None) -> ServiceResult:
        """Enroll *target* (default: *actor* itself).

        A previously removed recipient gets its receipt history back.
        """
        op = "enroll"
        warnings: list[str] = []
        try:
            actor = self._registry.validate_identity(actor)
            target = self._registry.validate_identity(target if target is not None else actor)
            with self._registry.transaction() as txn:
                with trace_span("authorize"):
                    txn.gate().require_enroll(actor, target)
                with trace_span("mutate"):
                    restored = txn.recipients.enroll(target)
        except RegistryError as exc:
            return ServiceResult.failure(op, exc)

        logger.info("Enrolled %s (by %s, %d receipts restored)", target, actor, len(restored))
        self._dispatch_event(
            "post_enroll",
            {"actor": actor, "recipient": target, "restored_receipts": len(restored)},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "recipient": target,
                "actor": actor,
                "restored_receipts": len(restored),
            },
            warnings=warnings,
        )

    @traced
    def remove(self, actor: str, target: str | None = None) -> ServiceResult:
        """Remove *target* (default: *actor* itself), archiving its history."""
        op = "remove"
        warnings: list[str] = []
        try:
            actor = self._registry.validate_identity(actor)
            target = self._registry.validate_identity(target if target is not None else actor)
            with self._registry.transaction() as txn:
                with trace_span("authorize"):
                    txn.gate().require_remove(actor, target)
                with trace_span("mutate"):
                    archived = txn.recipients.remove(target)
        except RegistryError as exc:
            return ServiceResult.failure(op, exc)

        logger.info("Removed %s (by %s, %d receipts archived)", target, actor, len(archived))
        self._dispatch_event(
            "post_remove",
            {"actor": actor, "recipient": target, "archived_receipts": len(archived)},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "recipient": target,
                "actor": actor,
                "archived_receipts": len(archived),
            },
            warnings=warnings,
        )
