"""Registry state and the authorization gate.

The registry state is created once at initialization and read by every
later action; nothing reassigns it. It is passed explicitly to the gate
instead of living in module-level state.
"""

from __future__ import annotations

from pydantic import BaseModel

from fanout.domain.errors import Unauthorized


class RegistryState(BaseModel):
    """Owner identity and the self-enrollment policy."""

    model_config = {"frozen": True}

    owner: str
    self_enrollment_allowed: bool


class AuthorizationGate:
    """Pure permission predicates over a :class:`RegistryState`."""

    def __init__(self, state: RegistryState) -> None:
        self._state = state

    def is_owner(self, actor: str) -> bool:
        return actor == self._state.owner

    def can_enroll(self, actor: str, target: str) -> bool:
        """Owner may enroll anyone; others only themselves, and only if policy allows."""
        if self.is_owner(actor):
            return True
        return actor == target and self._state.self_enrollment_allowed

    def can_remove(self, actor: str, target: str) -> bool:
        """Owner may remove anyone; any recipient may remove themselves."""
        return actor == target or self.is_owner(actor)

    def require_enroll(self, actor: str, target: str) -> None:
        if not self.can_enroll(actor, target):
            raise Unauthorized(
                f"{actor!r} may not enroll {target!r}",
                actor=actor,
                target=target,
            )

    def require_remove(self, actor: str, target: str) -> None:
        if not self.can_remove(actor, target):
            raise Unauthorized(
                f"{actor!r} may not remove {target!r}",
                actor=actor,
                target=target,
            )
