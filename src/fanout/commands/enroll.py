"""Command: enroll a recipient."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fanout.commands._base import FanCommand

if TYPE_CHECKING:
    from fanout.commands._context import AppContext


@click.command(
    cls=FanCommand,
    examples="""\
  fanout enroll --as alice
  fanout enroll bob --as treasury
  fanout --json enroll carol --as treasury""",
)
@click.argument("target", required=False)
@click.option("--as", "actor", required=True, help="Identity performing the enrollment.")
@click.pass_obj
def enroll(app: AppContext, target: str | None, actor: str) -> None:
    """Enroll TARGET (default: the acting identity) as a recipient."""
    from fanout.services.membership import MembershipService

    app.emit(MembershipService(app.registry).enroll(actor, target))
