"""Shared plumbing for the registry services."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fanout.infrastructure.registry import Registry

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the :class:`Registry` a service reads and writes through.

    Each operation opens its own ``registry.transaction()`` (or
    ``registry.reader()`` for queries) and announces what it changed only
    after that block has committed.
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def _dispatch_event(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Queue *hook_name* for plugins; a broken bus becomes a warning on the result."""
        bus = self._registry.event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
