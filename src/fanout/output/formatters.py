"""Output mode selection.

The CLI renders a ServiceResult for humans (Rich) or machines (``--json``).
``--quiet`` reduces output to identities or a bare status line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fanout.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from fanout.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Resolved output flags from the root CLI group."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display in the requested mode.

    JSON wins over quiet, and quiet wins over the Rich renderers.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
