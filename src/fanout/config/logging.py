"""Logging setup: structlog and stdlib ``logging`` share one stderr handler.

``--log-json`` switches the renderer to one JSON object per line. Records
from plain ``logging.getLogger(__name__)`` loggers pass through the same
processors, so both kinds carry ``level``, ``logger`` and ``timestamp``.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

_PRE_CHAIN: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all logging to stderr; ``fanout.*`` at DEBUG only when *verbose*."""
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_PRE_CHAIN,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("fanout").setLevel(logging.DEBUG if verbose else logging.WARNING)
    # Alembic logs every revision step at INFO.
    logging.getLogger("alembic").setLevel(logging.WARNING)
