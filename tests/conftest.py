"""Shared pytest fixtures and test helpers for fanout tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from fanout.config.settings import FanoutSettings
from fanout.infrastructure.database.engine import init_database
from fanout.infrastructure.registry import Registry

OWNER = "treasury"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / ".fanout")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def registry_root(tmp_path: Path) -> Path:
    """Temporary registry directory. All registry fixtures build on this."""
    return tmp_path


@pytest.fixture
def registry(registry_root: Path) -> Iterator[Registry]:
    """Registry with a database but no state row (``fanout init`` not run)."""
    settings = FanoutSettings.from_cli(registry_root=registry_root)
    r = Registry(settings)
    try:
        yield r
    finally:
        r.close()


@pytest.fixture
def initialized_registry(registry: Registry) -> Registry:
    """Registry owned by ``treasury`` with self-enrollment allowed."""
    init_registry(registry, OWNER)
    return registry


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """``-v`` turns telemetry on for the calling context; turn it back off."""
    yield
    from fanout.services.telemetry import disable_telemetry

    disable_telemetry()


@pytest.fixture
def _isolated_registry(registry_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp registry root so the CLI creates an isolated registry.

    Use via ``@pytest.mark.usefixtures("_isolated_registry")`` on command test
    classes.
    """
    monkeypatch.delenv("FANOUT_CONFIG", raising=False)
    monkeypatch.chdir(registry_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def init_registry(registry: Registry, owner: str = OWNER, **kwargs: Any) -> dict[str, Any]:
    """Initialize via InitService, asserting success."""
    from fanout.services.init import InitService

    result = InitService(registry).init_registry(owner, **kwargs)
    assert result.ok, result.error
    return result.data


def enroll(registry: Registry, actor: str, target: str | None = None) -> dict[str, Any]:
    """Enroll via MembershipService, asserting success."""
    from fanout.services.membership import MembershipService

    result = MembershipService(registry).enroll(actor, target)
    assert result.ok, result.error
    return result.data


def remove(registry: Registry, actor: str, target: str | None = None) -> dict[str, Any]:
    """Remove via MembershipService, asserting success."""
    from fanout.services.membership import MembershipService

    result = MembershipService(registry).remove(actor, target)
    assert result.ok, result.error
    return result.data


def deposit(registry: Registry, depositor: str, funds: str) -> dict[str, Any]:
    """Deposit via DistributionService, asserting success."""
    from fanout.services.distribution import DistributionService

    result = DistributionService(registry).deposit(depositor, funds)
    assert result.ok, result.error
    return result.data


def coins(*pairs: tuple[int, str]) -> list[dict[str, Any]]:
    """``coins((5, "token"))`` → ``[{"denom": "token", "amount": 5}]``."""
    return [{"denom": denom, "amount": amount} for amount, denom in pairs]
