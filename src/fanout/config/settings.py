"""FanoutSettings: one frozen object for CLI flags, env vars and ``fanout.toml``.

Precedence, highest first: keyword arguments (Click flags), ``FANOUT_*``
environment variables (``__`` separates section and key, as in
``FANOUT_IDENTITY__MIN_LENGTH``), the TOML file, the model defaults.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from fanout.config.discovery import find_config
from fanout.config.models import EventsConfig, IdentityConfig, PluginsConfig, RegistryConfig

# TOML file for the settings object under construction in this context.
_toml_file: ContextVar[Path | None] = ContextVar("fanout_toml_file", default=None)


class FanoutSettings(BaseSettings):
    """Resolved configuration of one CLI invocation.

    ``registry_root`` is the directory holding ``fanout.toml`` (or the CWD
    when there is none); registry state lives in ``.fanout/`` below it.
    """

    model_config = SettingsConfigDict(frozen=True, env_prefix="FANOUT_", env_nested_delimiter="__")

    registry_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = False

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=_toml_file.get()),
        )

    @property
    def state_dir(self) -> Path:
        return self.registry_root / ".fanout"

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        registry_root: Path | None = None,
        **flags: Any,
    ) -> FanoutSettings:
        """Build settings for a CLI run.

        An explicit *config_path* that does not exist is ignored. Without
        one, ``fanout.toml`` is searched upward from *registry_root* (or
        the CWD), and the registry root defaults to the file's directory.

        Raises:
            click.ClickException: If the TOML file cannot be parsed.
        """
        if config_path:
            toml_path = Path(config_path) if Path(config_path).is_file() else None
        else:
            toml_path = find_config(registry_root)
        if registry_root is None:
            registry_root = toml_path.parent if toml_path else Path.cwd()

        token = _toml_file.set(toml_path)
        try:
            return cls(registry_root=registry_root, config_path=toml_path, **flags)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _toml_file.reset(token)
