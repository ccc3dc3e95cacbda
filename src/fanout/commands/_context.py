"""The ``ctx.obj`` every subcommand receives through ``@click.pass_obj``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fanout.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from fanout.config.settings import FanoutSettings
    from fanout.infrastructure.registry import Registry
    from fanout.services.result import ServiceResult


class AppContext:
    """Resolved settings plus a registry opened on first use.

    ``--help``, ``--examples`` and ``--version`` exit before any command
    body runs, so they never create ``.fanout/fanout.db``.
    """

    def __init__(self, settings: FanoutSettings) -> None:
        from fanout.config.logging import configure_logging
        from fanout.services.telemetry import enable_telemetry

        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._registry: Registry | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def registry(self) -> Registry:
        if self._registry is None:
            from fanout.infrastructure.registry import Registry

            registry = Registry(self.settings)
            registry.init_event_bus(sync=self.settings.sync)
            self._registry = registry
        return self._registry

    def close(self) -> None:
        """Retry failed plugin events, then release the database."""
        registry, self._registry = self._registry, None
        if registry is not None:
            registry.close()

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failure goes to stderr and exits with status 1.

        Outside JSON mode the warnings of a successful result are echoed
        to stderr so piped stdout stays clean.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
