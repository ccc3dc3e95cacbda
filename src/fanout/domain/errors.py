"""Registry error taxonomy.

Every domain failure carries a stable ``code`` so the service layer can
translate it into a :class:`~fanout.services.result.ServiceError` without
string matching. ``InternalInvariant`` marks states that callers are
expected to make unreachable; it is never a user mistake.
"""

from __future__ import annotations

from typing import Any


class RegistryError(Exception):
    """Base class for all registry failures."""

    code: str = "REGISTRY_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class Unauthorized(RegistryError):
    """Actor lacks permission for the action on the given target."""

    code = "UNAUTHORIZED"


class AlreadyEnrolled(RegistryError):
    code = "ALREADY_ENROLLED"


class NotEnrolled(RegistryError):
    code = "NOT_ENROLLED"


class NoRecipients(RegistryError):
    """Deposit attempted while no recipient is enrolled."""

    code = "NO_RECIPIENTS"


class InvalidIdentity(RegistryError):
    code = "INVALID_IDENTITY"


class InvalidBundle(RegistryError):
    code = "INVALID_BUNDLE"


class NotFound(RegistryError):
    """Queried identity has no entry in the requested set."""

    code = "NOT_FOUND"


class NotInitialized(RegistryError):
    code = "NOT_INITIALIZED"


class AlreadyInitialized(RegistryError):
    code = "ALREADY_INITIALIZED"


class InternalInvariant(RegistryError):
    """A precondition the callers guarantee was violated."""

    code = "INTERNAL_INVARIANT"
