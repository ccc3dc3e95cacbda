"""``fanout upgrade``: bring ``.fanout/fanout.db`` to the current schema."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fanout.commands._base import FanCommand
from fanout.services.upgrade import UpgradeService

if TYPE_CHECKING:
    from fanout.commands._context import AppContext


@click.command(
    cls=FanCommand,
    examples="""\
  fanout upgrade --check
  fanout upgrade
  fanout --json upgrade""",
)
@click.option("--check", "check_only", is_flag=True, help="List pending revisions and stop.")
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Back up the registry database and apply pending schema revisions."""
    service = UpgradeService(app.registry)
    if check_only:
        app.emit(service.check_pending())
    else:
        app.emit(service.apply())
