"""Timing spans for ``--verbose`` output.

``@traced`` opens a root span around a service method and attaches the
finished tree to ``ServiceResult.meta["telemetry"]``. ``trace_span`` opens
child spans inside it. Both do nothing unless :func:`enable_telemetry`
ran in the current context.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec

import structlog

from fanout.services.result import ServiceResult

log = structlog.get_logger("fanout.telemetry")

_enabled: ContextVar[bool] = ContextVar("fanout_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("fanout_active_span", default=None)


@dataclass
class Span:
    name: str
    started: float = field(default_factory=time.perf_counter)
    elapsed_ms: float = 0.0
    notes: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)

    def finish(self) -> None:
        self.elapsed_ms = (time.perf_counter() - self.started) * 1000

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.elapsed_ms, 2)}
        if self.notes:
            tree["annotations"] = dict(self.notes)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.finish()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a step as a child of the active span. Yields None when not tracing."""
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name)
    parent.children.append(child)
    with _activate(child):
        yield child


def annotate(key: str, value: Any) -> None:
    """Attach *key* to the active span; ignored when not tracing."""
    span = _active.get() if _enabled.get() else None
    if span is not None:
        span.notes[key] = value


_P = ParamSpec("_P")


def traced(func: Callable[_P, ServiceResult]) -> Callable[_P, ServiceResult]:
    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
        if not _enabled.get():
            return func(*args, **kwargs)

        with _activate(Span(func.__qualname__)) as root:
            result = func(*args, **kwargs)
        log.debug(
            "span.complete",
            span_name=root.name,
            duration_ms=round(root.elapsed_ms, 2),
            ok=result.ok,
        )
        meta = {**(result.meta or {}), "telemetry": root.to_dict()}
        return result.model_copy(update={"meta": meta})

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
