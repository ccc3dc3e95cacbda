"""``fanout`` entry point: global flags, settings, and subcommand registration."""

from __future__ import annotations

from typing import Any

import click

from fanout import __version__
from fanout.commands import register_commands
from fanout.commands._base import FanGroup
from fanout.commands._context import AppContext
from fanout.config.settings import FanoutSettings


@click.group(
    cls=FanGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    examples="""\
  fanout init treasury
  fanout enroll --as alice
  fanout deposit 1000token --as sponsor
  fanout --json query recipient alice""",
)
@click.version_option(__version__, prog_name="fanout")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only identities or transfers.")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs and timing spans.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", help="Path to a fanout.toml to use.")
@click.option("--sync", is_flag=True, help="Run plugin hooks before the command returns.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: Any) -> None:
    """fanout — split deposits equally across enrolled recipients."""
    app = AppContext(FanoutSettings.from_cli(config_path=config_path, **flags))
    ctx.obj = app
    # Runs after the subcommand, including on SystemExit from emit().
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
