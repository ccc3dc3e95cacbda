"""The value every service method hands back to the CLI.

A failed operation is still a normal return: ``ok`` is False and ``error``
carries the machine-readable code. Only bugs escape as exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fanout.domain.errors import RegistryError


class ServiceError(BaseModel):
    """Error code, human message, and whatever context the failure attached."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: RegistryError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.detail)


class ServiceResult(BaseModel):
    """Outcome of one registry operation.

    ``data`` holds the operation payload (transfers, listings, state),
    ``warnings`` holds non-fatal notes such as an undistributed remainder,
    and ``meta`` holds the timing tree when telemetry is on.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, exc: RegistryError) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
