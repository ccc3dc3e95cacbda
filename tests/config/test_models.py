"""Tests for config section models."""

import pytest
from pydantic import ValidationError

from fanout.config.models import EventsConfig, IdentityConfig, PluginsConfig, RegistryConfig


class TestDefaults:
    def test_section_defaults(self) -> None:
        assert RegistryConfig().self_enrollment_allowed is True
        assert RegistryConfig().backup_max_count == 10
        assert IdentityConfig().min_length == 3
        assert IdentityConfig().max_length == 90
        assert EventsConfig().max_retries == 3
        assert EventsConfig().max_workers == 2
        assert PluginsConfig().transfer_log is False

    def test_sparse_override(self) -> None:
        cfg = RegistryConfig.model_validate({"self_enrollment_allowed": False})
        assert cfg.self_enrollment_allowed is False
        assert cfg.backup_max_count == 10


class TestValidation:
    def test_backup_count_positive(self) -> None:
        with pytest.raises(ValidationError):
            RegistryConfig(backup_max_count=0)

    def test_identity_min_length_positive(self) -> None:
        with pytest.raises(ValidationError):
            IdentityConfig(min_length=0)

    def test_frozen(self) -> None:
        cfg = RegistryConfig()
        with pytest.raises(ValidationError):
            cfg.self_enrollment_allowed = False  # type: ignore[misc]
