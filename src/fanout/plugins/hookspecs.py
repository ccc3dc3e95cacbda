"""Pluggy hook specifications for fanout lifecycle events.

Four lifecycle events, dispatched after the registry transaction commits,
asynchronously via ThreadPoolExecutor unless ``--sync`` is given.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("fanout")


class FanoutHookSpec:
    """Hook specifications for the fanout plugin system."""

    @hookspec
    def post_init(self, owner: str, self_enrollment_allowed: bool) -> None:
        """Called after the registry state is created."""

    @hookspec
    def post_enroll(self, actor: str, recipient: str, restored_receipts: int) -> None:
        """Called after a recipient is enrolled."""

    @hookspec
    def post_remove(self, actor: str, recipient: str, archived_receipts: int) -> None:
        """Called after a recipient is removed."""

    @hookspec
    def post_deposit(
        self,
        depositor: str,
        recipients: list[str],
        count: int,
        transfers: list[dict[str, Any]],
    ) -> None:
        """Called after a deposit is split.

        *transfers* holds one ``{"recipient", "funds"}`` instruction per
        recipient, in the order of *recipients*.
        """
