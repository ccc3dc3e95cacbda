"""Registry — repository pattern with ACID transaction coordination.

The Registry is the single dependency injected into every service. It owns
the database engine and the plugin event bus. :meth:`Registry.transaction`
yields a :class:`RegistryTransaction` whose ledgers all share one database
transaction: if any step raises, every write of the action rolls back.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select

from fanout.domain.authorization import AuthorizationGate, RegistryState
from fanout.domain.errors import AlreadyInitialized, NotInitialized
from fanout.domain.identity import validate_identity
from fanout.domain.ledgers import DepositorLedger, RecipientSet, RemovedRecipientSet
from fanout.infrastructure.database.engine import db_path_for, init_database
from fanout.infrastructure.database.schema import (
    depositors,
    now_iso,
    recipients,
    registry_state,
    removed_recipients,
)
from fanout.infrastructure.store import SqlReceiptMap

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from fanout.config.settings import FanoutSettings

logger = logging.getLogger(__name__)

_STATE_ROW_ID = 1


# ---------------------------------------------------------------------------
# RegistryTransaction: yielded by transaction() and reader()
# ---------------------------------------------------------------------------


@dataclass
class RegistryTransaction:
    """Active database connection with ledger views bound to it."""

    conn: Connection

    def load_state(self) -> RegistryState:
        """Read the registry state.

        Raises:
            NotInitialized: If ``fanout init`` has not been run.
        """
        row = self.conn.execute(
            select(registry_state).where(registry_state.c.id == _STATE_ROW_ID)
        ).first()
        if row is None:
            raise NotInitialized("Registry is not initialized; run 'fanout init' first")
        return RegistryState(
            owner=row.owner,
            self_enrollment_allowed=bool(row.self_enrollment_allowed),
        )

    def create_state(self, state: RegistryState) -> None:
        """Persist the registry state once.

        Raises:
            AlreadyInitialized: If a state row already exists.
        """
        existing = self.conn.execute(
            select(registry_state.c.owner).where(registry_state.c.id == _STATE_ROW_ID)
        ).first()
        if existing is not None:
            raise AlreadyInitialized(
                f"Registry already initialized with owner {existing.owner!r}",
                owner=existing.owner,
            )
        self.conn.execute(
            insert(registry_state).values(
                id=_STATE_ROW_ID,
                owner=state.owner,
                self_enrollment_allowed=int(state.self_enrollment_allowed),
                created=now_iso(),
            )
        )

    def gate(self) -> AuthorizationGate:
        return AuthorizationGate(self.load_state())

    @property
    def removed(self) -> RemovedRecipientSet:
        return RemovedRecipientSet(SqlReceiptMap(self.conn, removed_recipients))

    @property
    def recipients(self) -> RecipientSet:
        return RecipientSet(SqlReceiptMap(self.conn, recipients), self.removed)

    @property
    def depositors(self) -> DepositorLedger:
        return DepositorLedger(SqlReceiptMap(self.conn, depositors))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class Registry:
    """Repository encapsulating database and event-bus access.

    Constructed once at CLI startup from :class:`FanoutSettings`.
    Services receive the Registry via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: FanoutSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(settings.state_dir)
        self._event_bus: Any | None = None

    @property
    def root(self) -> Path:
        """The registry root directory."""
        return self._settings.registry_root

    @property
    def db_path(self) -> Path:
        return db_path_for(self._settings.state_dir)

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> FanoutSettings:
        """The resolved settings for this registry."""
        return self._settings

    @property
    def event_bus(self) -> Any | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self, *, sync: bool = False) -> None:
        """Initialize the plugin event bus.

        Creates a PluginManager, discovers entry-point and local plugins,
        registers the built-in transfer log when enabled, and wires up
        the EventBus. Called by AppContext when the registry is first accessed.
        """
        from fanout.plugins.event_bus import EventBus
        from fanout.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load(local_dir=self._settings.state_dir / "plugins")

        if self._settings.plugins.transfer_log:
            from fanout.plugins.builtins.transfer_log import TransferLogPlugin

            log_path = self._settings.state_dir / "transfers.jsonl"
            pm.register_plugin(TransferLogPlugin(log_path), name="transfer-log-builtin")

        events = self._settings.events
        self._event_bus = EventBus(
            self._engine,
            pm,
            sync=sync,
            max_retries=events.max_retries,
            max_workers=events.max_workers,
        )

    def validate_identity(self, value: str) -> str:
        """Validate *value* against the configured identity rules."""
        rules = self._settings.identity
        return validate_identity(
            value,
            min_length=rules.min_length,
            max_length=rules.max_length,
            pattern=rules.pattern,
        )

    @contextmanager
    def transaction(self) -> Iterator[RegistryTransaction]:
        """Write transaction spanning every ledger.

        Commits when the block exits normally and rolls back on any
        exception, which then propagates to the caller.

        Usage::

            with registry.transaction() as txn:
                txn.recipients.enroll("alice")
        """
        with self._engine.begin() as conn:
            yield RegistryTransaction(conn=conn)

    @contextmanager
    def reader(self) -> Iterator[RegistryTransaction]:
        """Read-only view; nothing is committed."""
        with self._engine.connect() as conn:
            yield RegistryTransaction(conn=conn)

    def close(self) -> None:
        """Retry undelivered events, stop the event bus, dispose the engine."""
        if self._event_bus is not None:
            self._event_bus.drain()
            self._event_bus.shutdown()
        self._engine.dispose()
