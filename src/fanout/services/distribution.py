"""DistributionService — deposits split equally across active recipients.

Pipeline: VALIDATE → SNAPSHOT → RECORD → SPLIT → CREDIT → EVENT → RESPOND

SNAPSHOT through CREDIT run inside one registry transaction. The member
list is read once and every later step uses that list, so the number of
shares cannot change mid-deposit. A fault anywhere in the span rolls back
the depositor receipt together with the recipient receipts.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from fanout.domain.bundle import Coin, bundle_to_json, make_bundle, parse_coins
from fanout.domain.errors import NoRecipients, RegistryError
from fanout.domain.split import remainder, split_bundle
from fanout.services.base import BaseService
from fanout.services.contracts import DepositResultData, dump_validated
from fanout.services.result import ServiceResult
from fanout.services.telemetry import annotate, trace_span, traced

log = structlog.get_logger("fanout.distribution")


class DistributionService(BaseService):
    """Accepts deposits and emits one transfer instruction per recipient."""

    @traced
    def deposit(
        self,
        depositor: str,
        funds: str | Iterable[Coin | dict[str, Any]],
    ) -> ServiceResult:
        """Record a deposit from *depositor* and split it across recipients.

        Args:
            depositor: Identity making the deposit.
            funds: Coin string (``"1000token,5uatom"``) or coins.

        Returns ``data.transfers``: ``[{recipient, funds}]`` in ascending
        recipient order, for the host to execute as real transfers.
        """
        op = "deposit"
        warnings: list[str] = []

        try:
            with trace_span("validate"):
                depositor = self._registry.validate_identity(depositor)
                bundle = parse_coins(funds) if isinstance(funds, str) else make_bundle(funds)

            with self._registry.transaction() as txn:
                txn.load_state()

                with trace_span("snapshot"):
                    ledger = txn.recipients
                    members = ledger.active_members()
                    if not members:
                        raise NoRecipients(
                            "No recipients are enrolled; deposit rejected",
                            depositor=depositor,
                        )

                with trace_span("record"):
                    txn.depositors.record_deposit(depositor, bundle)

                with trace_span("split"):
                    shares = split_bundle(bundle, len(members))
                    dropped = remainder(bundle, len(members))

                with trace_span("credit"):
                    transfers: list[dict[str, Any]] = []
                    for member, share in zip(members, shares, strict=True):
                        transfers.append({"recipient": member, "funds": bundle_to_json(share)})
                        ledger.append_receipt(member, share)
        except RegistryError as exc:
            return ServiceResult.failure(op, exc)

        annotate("recipients", len(members))

        log.info(
            "deposit.distributed",
            depositor=depositor,
            recipients=members,
            amount_of_recipients=len(members),
        )

        self._dispatch_event(
            "post_deposit",
            {
                "depositor": depositor,
                "recipients": members,
                "count": len(members),
                "transfers": transfers,
            },
            warnings,
        )

        leftover = [str(c) for c in dropped if c.amount > 0]
        if leftover:
            warnings.append("Undistributed remainder: " + ", ".join(leftover))

        data = dump_validated(
            DepositResultData,
            {
                "depositor": depositor,
                "funds": bundle_to_json(bundle),
                "recipients": members,
                "count": len(members),
                "transfers": transfers,
                "dropped": bundle_to_json(dropped),
            },
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
