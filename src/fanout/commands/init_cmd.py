"""Command: registry initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from fanout.commands._base import FanCommand

if TYPE_CHECKING:
    from fanout.commands._context import AppContext

_INIT_EXAMPLES = """\
  fanout init treasury
  fanout init treasury --owner-only
  fanout --json init dao.admin --self-enrollment"""


@click.command("init", cls=FanCommand, examples=_INIT_EXAMPLES)
@click.argument("owner")
@click.option(
    "--self-enrollment/--owner-only",
    "self_enrollment",
    default=None,
    help="Whether identities other than the owner may enroll themselves. "
    "Defaults to [registry] self_enrollment_allowed.",
)
@click.pass_obj
def init_cmd(app: AppContext, owner: str, self_enrollment: bool | None) -> None:
    """Initialize the registry with OWNER as its administrator."""
    from fanout.services.init import InitService

    svc = InitService(app.registry)
    app.emit(svc.init_registry(owner, self_enrollment_allowed=self_enrollment))
