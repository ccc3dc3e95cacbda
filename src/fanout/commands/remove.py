"""Command: remove a recipient."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fanout.commands._base import FanCommand

if TYPE_CHECKING:
    from fanout.commands._context import AppContext


@click.command(
    cls=FanCommand,
    examples="""\
  fanout remove --as alice
  fanout remove bob --as treasury""",
)
@click.argument("target", required=False)
@click.option("--as", "actor", required=True, help="Identity performing the removal.")
@click.pass_obj
def remove(app: AppContext, target: str | None, actor: str) -> None:
    """Remove TARGET (default: the acting identity), archiving its receipts."""
    from fanout.services.membership import MembershipService

    app.emit(MembershipService(app.registry).remove(actor, target))
