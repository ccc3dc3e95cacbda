"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer so key regressions (for example ``transfers`` vs
``instructions``) fail fast in tests and during development.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class CoinData(BaseModel):
    denom: str
    amount: int = Field(ge=0)


class TransferInstruction(BaseModel):
    """One outbound value transfer for the host to execute."""

    recipient: str
    funds: list[CoinData]


class DepositResultData(BaseModel):
    """Payload contract for ``DistributionService.deposit``."""

    depositor: str
    funds: list[CoinData]
    recipients: list[str]
    count: int
    transfers: list[TransferInstruction]
    dropped: list[CoinData]


class HistoryData(BaseModel):
    """Payload contract for per-identity receipt queries."""

    identity: str
    status: str
    receipts: list[list[CoinData]]
    count: int
    totals: dict[str, int]


class MembersData(BaseModel):
    """Payload contract for identity list queries."""

    count: int
    items: list[str]


class StateData(BaseModel):
    """Payload contract for ``QueryService.get_state`` and ``init_registry``."""

    owner: str
    self_enrollment_allowed: bool
