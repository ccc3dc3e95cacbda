"""InitService — registry initialization.

The state row and the schema version stamp commit together.
"""

from __future__ import annotations

import logging

from fanout.domain.authorization import RegistryState
from fanout.domain.errors import RegistryError
from fanout.infrastructure.database.migrations import stamp_head
from fanout.services.base import BaseService
from fanout.services.contracts import StateData, dump_validated
from fanout.services.result import ServiceResult
from fanout.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class InitService(BaseService):
    """Creates the registry state row, once."""

    @traced
    def init_registry(
        self,
        owner: str,
        *,
        self_enrollment_allowed: bool | None = None,
    ) -> ServiceResult:
        """Record *owner* and the self-enrollment policy.

        When *self_enrollment_allowed* is None the ``[registry]`` config
        default applies.
        """
        op = "init_registry"
        warnings: list[str] = []
        if self_enrollment_allowed is None:
            self_enrollment_allowed = self._registry.settings.registry.self_enrollment_allowed

        try:
            owner = self._registry.validate_identity(owner)
            state = RegistryState(owner=owner, self_enrollment_allowed=self_enrollment_allowed)
            with self._registry.transaction() as txn:
                with trace_span("persist"):
                    txn.create_state(state)
                with trace_span("stamp"):
                    stamp_head(txn.conn)
        except RegistryError as exc:
            return ServiceResult.failure(op, exc)

        self._dispatch_event(
            "post_init",
            {"owner": owner, "self_enrollment_allowed": self_enrollment_allowed},
            warnings,
        )
        logger.info("Registry initialized for owner %s", owner)

        data = dump_validated(StateData, state.model_dump())
        data["path"] = str(self._registry.db_path)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
