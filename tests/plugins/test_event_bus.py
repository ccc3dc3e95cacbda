"""Tests for the WAL-backed EventBus."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

import pluggy
import pytest
from sqlalchemy import select, update
from sqlalchemy.engine import Engine

from fanout.infrastructure.database.schema import event_wal
from fanout.plugins.event_bus import EventBus
from fanout.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("fanout")


class Recorder:
    def __init__(self) -> None:
        self.inits: list[str] = []

    @hookimpl
    def post_init(self, owner: str, self_enrollment_allowed: bool) -> None:
        self.inits.append(owner)


class Flaky:
    @hookimpl
    def post_init(self, owner: str, self_enrollment_allowed: bool) -> None:
        msg = "flaky"
        raise RuntimeError(msg)


def _bus(engine: Engine, plugin: object, **kwargs: Any) -> EventBus:
    pm = PluginManager()
    pm.register_plugin(plugin)
    return EventBus(engine, pm, **kwargs)


def _rows(engine: Engine) -> list[Any]:
    with engine.connect() as conn:
        return conn.execute(select(event_wal).order_by(event_wal.c.id)).fetchall()


_PAYLOAD = {"owner": "treasury", "self_enrollment_allowed": True}


class TestSyncDispatch:
    def test_dispatch_completes(self, db_engine: Engine) -> None:
        recorder = Recorder()
        bus = _bus(db_engine, recorder, sync=True)
        event_id = bus.dispatch("post_init", _PAYLOAD)
        assert recorder.inits == ["treasury"]
        row = _rows(db_engine)[0]
        assert row.id == event_id
        assert row.status == "completed"
        assert json.loads(row.payload) == _PAYLOAD
        assert row.completed is not None

    def test_unknown_hook_marked_completed(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, Recorder(), sync=True)
        bus.dispatch("post_nothing", {})
        assert _rows(db_engine)[0].status == "completed"

    def test_failure_marked_failed(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, Flaky(), sync=True, max_retries=3)
        bus.dispatch("post_init", _PAYLOAD)
        row = _rows(db_engine)[0]
        assert row.status == "failed"
        assert row.retries == 1
        assert row.error == "flaky"

    def test_dead_letter_after_max_retries(self, db_engine: Engine) -> None:
        bus = _bus(db_engine, Flaky(), sync=True, max_retries=2)
        bus.dispatch("post_init", _PAYLOAD)
        results = bus.drain()
        assert results == [{"id": 1, "hook_name": "post_init", "status": "dead_letter"}]
        assert bus.drain() == []


class TestAsyncDispatch:
    @pytest.fixture
    def recorder_bus(self, db_engine: Engine) -> Iterator[tuple[EventBus, Recorder]]:
        recorder = Recorder()
        bus = _bus(db_engine, recorder, sync=False, max_workers=1)
        try:
            yield bus, recorder
        finally:
            bus.shutdown()

    def test_shutdown_waits_for_events(
        self, db_engine: Engine, recorder_bus: tuple[EventBus, Recorder]
    ) -> None:
        bus, recorder = recorder_bus
        bus.dispatch("post_init", _PAYLOAD)
        bus.shutdown()
        assert recorder.inits == ["treasury"]
        assert _rows(db_engine)[0].status == "completed"


class TestDrain:
    def test_retries_pending(self, db_engine: Engine) -> None:
        recorder = Recorder()
        bus = _bus(db_engine, recorder, sync=True)
        bus.dispatch("post_init", _PAYLOAD)
        with db_engine.begin() as conn:
            conn.execute(update(event_wal).values(status="pending"))

        results = bus.drain()
        assert results[0]["status"] == "completed"
        assert recorder.inits == ["treasury", "treasury"]

    def test_nothing_to_drain(self, db_engine: Engine) -> None:
        assert _bus(db_engine, Recorder(), sync=True).drain() == []
