"""Identity validation.

An identity names an account (owner, recipient or depositor). Identities
are compared by exact string equality after validation: nothing is
lower-cased or trimmed here, input that is not already in canonical form
is rejected instead.

INVARIANT: A validated identity is returned unchanged.
"""

from __future__ import annotations

import re

from fanout.domain.errors import InvalidIdentity

DEFAULT_PATTERN = r"^[0-9a-z_.:-]+$"
DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 90

_DEFAULT_RE = re.compile(DEFAULT_PATTERN)


def validate_identity(
    value: str,
    *,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
    pattern: str | re.Pattern[str] | None = None,
) -> str:
    """Return *value* if it is a well-formed identity.

    Raises:
        InvalidIdentity: If *value* is too short, too long, or does not match
            *pattern* in full (the default admits no uppercase).
    """
    if not isinstance(value, str):
        raise InvalidIdentity(f"Identity must be a string, got {type(value).__name__}")
    if len(value) < min_length:
        raise InvalidIdentity(
            f"Identity {value!r} too short (minimum {min_length} characters)",
            identity=value,
        )
    if len(value) > max_length:
        raise InvalidIdentity(
            f"Identity {value!r} too long (maximum {max_length} characters)",
            identity=value,
        )
    if pattern is None:
        compiled = _DEFAULT_RE
    elif isinstance(pattern, str):
        compiled = re.compile(pattern)
    else:
        compiled = pattern
    if compiled.fullmatch(value) is None:
        raise InvalidIdentity(
            f"Identity {value!r} contains invalid characters",
            identity=value,
            pattern=compiled.pattern,
        )
    return value

