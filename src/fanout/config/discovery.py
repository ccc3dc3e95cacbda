"""Locating ``fanout.toml``.

``FANOUT_CONFIG`` names the file outright. Otherwise the search starts in
the given directory (default: CWD) and climbs toward the filesystem root,
stopping at the first ``fanout.toml``. Its directory is the registry root.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "fanout.toml"
CONFIG_ENV_VAR = "FANOUT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
