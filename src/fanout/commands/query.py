"""Command group: registry state, receipt histories and membership listings."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fanout.commands._base import FanGroup
from fanout.services.query import QueryService

if TYPE_CHECKING:
    from fanout.commands._context import AppContext

_QUERY_EXAMPLES = """\
  fanout query state
  fanout query recipients
  fanout query recipient alice
  fanout query removed bob
  fanout query depositor sponsor
  fanout -q query depositors"""


@click.group(cls=FanGroup, examples=_QUERY_EXAMPLES)
@click.pass_obj
def query(app: AppContext) -> None:
    """Inspect registry state, receipts and members."""


@query.command(examples="  fanout query state\n  fanout --json query state")
@click.pass_obj
def state(app: AppContext) -> None:
    """Show the owner and enrollment policy."""
    app.emit(QueryService(app.registry).get_state())


@query.command(examples="  fanout query recipients\n  fanout -q query recipients")
@click.pass_obj
def recipients(app: AppContext) -> None:
    """List enrolled recipients in ascending order."""
    app.emit(QueryService(app.registry).list_recipients())


@query.command("removed-recipients", examples="  fanout query removed-recipients")
@click.pass_obj
def removed_recipients(app: AppContext) -> None:
    """List identities that have been removed."""
    app.emit(QueryService(app.registry).list_removed_recipients())


@query.command(examples="  fanout query depositors")
@click.pass_obj
def depositors(app: AppContext) -> None:
    """List identities that have deposited."""
    app.emit(QueryService(app.registry).list_depositors())


@query.command(examples="  fanout query recipient alice\n  fanout --json query recipient alice")
@click.argument("identity")
@click.pass_obj
def recipient(app: AppContext, identity: str) -> None:
    """Show the receipts of an enrolled recipient."""
    app.emit(QueryService(app.registry).get_recipient(identity))


@query.command(examples="  fanout query removed bob")
@click.argument("identity")
@click.pass_obj
def removed(app: AppContext, identity: str) -> None:
    """Show the receipts archived when IDENTITY was last removed."""
    app.emit(QueryService(app.registry).get_removed_recipient(identity))


@query.command(examples="  fanout query depositor sponsor")
@click.argument("identity")
@click.pass_obj
def depositor(app: AppContext, identity: str) -> None:
    """Show every deposit made by IDENTITY."""
    app.emit(QueryService(app.registry).get_depositor(identity))
