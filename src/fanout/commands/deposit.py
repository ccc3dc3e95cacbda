"""Command: deposit funds for distribution."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fanout.commands._base import FanCommand

if TYPE_CHECKING:
    from fanout.commands._context import AppContext


@click.command(
    cls=FanCommand,
    examples="""\
  fanout deposit 1000token --as sponsor
  fanout deposit "1000token,5uatom" --as sponsor
  fanout -q deposit 300token --as sponsor
  fanout --json deposit 4500token --as sponsor""",
)
@click.argument("funds")
@click.option("--as", "depositor", required=True, help="Identity making the deposit.")
@click.pass_obj
def deposit(app: AppContext, funds: str, depositor: str) -> None:
    """Deposit FUNDS and split them equally across enrolled recipients.

    FUNDS is a comma-separated list of AMOUNTDENOM coins.
    """
    from fanout.services.distribution import DistributionService

    app.emit(DistributionService(app.registry).deposit(depositor, funds))
