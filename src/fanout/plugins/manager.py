"""Plugin loading for fanout.

Plugins come from the ``fanout.plugins`` entry point group (a module or an
instance carrying hook functions) and from ``*.py`` files in
``.fanout/plugins/``. In a local file every class with at least one
``@hookimpl`` method is instantiated with no arguments and registered.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from typing import TYPE_CHECKING

import pluggy

from fanout.plugins.hookspecs import FanoutHookSpec

if TYPE_CHECKING:
    from pathlib import Path
    from types import ModuleType

PROJECT_NAME = "fanout"
ENTRY_POINT_GROUP = "fanout.plugins"
LOCAL_MODULE_PREFIX = "fanout_local_plugin_"

logger = logging.getLogger(__name__)


class PluginManager(pluggy.PluginManager):
    """pluggy manager with the fanout hook specs already added."""

    def __init__(self) -> None:
        super().__init__(PROJECT_NAME)
        self.add_hookspecs(FanoutHookSpec)
        self.is_loaded = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then local files. Returns every plugin name."""
        self.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if local_dir is not None and local_dir.is_dir():
            for path in sorted(local_dir.glob("[!_]*.py")):
                self._load_local(path)
        self.is_loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        registered = self.register(plugin, name=name or type(plugin).__name__)
        logger.debug("Registered plugin: %s", registered)

    def list_plugin_names(self) -> list[str]:
        return [name for name, _ in self.list_name_plugin()]

    def _load_local(self, path: Path) -> None:
        module_name = LOCAL_MODULE_PREFIX + path.stem
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            logger.warning("Not a loadable plugin file: %s", path)
            return
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception:
            del sys.modules[module_name]
            logger.warning("Skipping local plugin %s", path, exc_info=True)
            return

        for cls in _hook_classes(module):
            try:
                self.register_plugin(cls(), name=f"{module_name}.{cls.__name__}")
            except Exception:
                logger.warning("Skipping plugin %s in %s", cls.__name__, path, exc_info=True)


def _hook_classes(module: ModuleType) -> list[type]:
    """Classes defined in *module* with a method marked by ``HookimplMarker("fanout")``."""
    marker = f"{PROJECT_NAME}_impl"
    return [
        obj
        for obj in vars(module).values()
        if inspect.isclass(obj)
        and obj.__module__ == module.__name__
        and any(hasattr(member, marker) for member in vars(obj).values())
    ]
