"""Sections of ``fanout.toml``.

Every key has a default here, so an empty or missing file is valid and a
file only needs the keys it changes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from fanout.domain.identity import DEFAULT_MAX_LENGTH, DEFAULT_MIN_LENGTH, DEFAULT_PATTERN


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    self_enrollment_allowed: bool = True
    backup_max_count: int = Field(default=10, ge=1)


class IdentityConfig(BaseModel):
    """[identity] section."""

    model_config = {"frozen": True}

    min_length: int = Field(default=DEFAULT_MIN_LENGTH, ge=1)
    max_length: int = Field(default=DEFAULT_MAX_LENGTH, ge=1)
    pattern: str = DEFAULT_PATTERN


class EventsConfig(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    max_retries: int = 3
    max_workers: int = 2


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    transfer_log: bool = False

