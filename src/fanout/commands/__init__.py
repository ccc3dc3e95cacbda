"""Subcommand modules for fanout.

Provides register_commands() which uses deferred imports to keep
``fanout --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the query group and the standalone commands on the root group."""
    from fanout.commands.query import query

    cli.add_command(query)

    from fanout.commands.deposit import deposit
    from fanout.commands.enroll import enroll
    from fanout.commands.init_cmd import init_cmd
    from fanout.commands.remove import remove
    from fanout.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(enroll)
    cli.add_command(remove)
    cli.add_command(deposit)
    cli.add_command(upgrade)
