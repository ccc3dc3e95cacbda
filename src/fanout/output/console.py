"""Rich Console factory and theme for fanout output.

Consoles render to a StringIO buffer so renderers keep a
``str``-returning contract. Rich disables color codes outside a TTY.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FANOUT_THEME = Theme(
    {
        "fan.ok": "bold green",
        "fan.error": "bold red",
        "fan.warning": "bold yellow",
        "fan.op": "bold cyan",
        "fan.key": "dim",
        "fan.id": "bold blue",
        "fan.path": "dim",
        "fan.amount": "magenta",
        "fan.status.active": "green",
        "fan.status.removed": "yellow",
        "fan.status.depositor": "cyan",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "active": "fan.status.active",
    "removed": "fan.status.removed",
    "depositor": "fan.status.depositor",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=FANOUT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    return _STATUS_STYLES.get(status, "")
