"""Human-readable rendering of a ServiceResult with Rich.

Every renderer draws into a buffered console through :class:`_Out` and the
caller gets plain text back. Ops missing from ``_RENDERERS`` print their
data as ``key: value`` lines.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from fanout.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from fanout.services.result import ServiceResult

_IDENTITY_KEYS = frozenset({"owner", "recipient", "actor", "depositor", "identity"})


def format_coins(coins: list[dict[str, Any]]) -> str:
    """``[{"denom": "token", "amount": 5}]`` → ``"5token"``; ``"-"`` when empty."""
    return ",".join(f"{c['amount']}{c['denom']}" for c in coins) or "-"


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* as text. No ANSI codes are emitted outside a terminal."""
    out = _Out(verbose)
    if not result.ok:
        out.error(result)
    else:
        _RENDERERS.get(result.op, _generic)(out, result)
        out.meta(result)
    return out.text()


def render_quiet(result: ServiceResult) -> str:
    """One identity per line for listings, ``recipient funds`` per transfer for deposits."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {message}"
    if isinstance(result.data.get("items"), list):
        return "\n".join(map(str, result.data["items"]))
    if isinstance(result.data.get("transfers"), list):
        return "\n".join(
            f"{t['recipient']} {format_coins(t['funds'])}" for t in result.data["transfers"]
        )
    return f"OK: {result.op}"


class _Out:
    def __init__(self, verbose: bool) -> None:
        self.console = create_console()
        self.verbose = verbose

    def text(self) -> str:
        return get_output(self.console).rstrip("\n")

    def print(self, *items: Any) -> None:
        self.console.print(*items)

    def ok(self, result: ServiceResult) -> None:
        self.print(Text.assemble(("OK", "fan.ok"), (f"  {result.op}", "fan.op")))

    def field(self, key: str, value: Any) -> None:
        if key in _IDENTITY_KEYS:
            style = "fan.id"
        elif key.endswith("path"):
            style = "fan.path"
        else:
            style = ""
        self.print(Text.assemble((f"  {key}: ", "fan.key"), (str(value), style)))

    def error(self, result: ServiceResult) -> None:
        err = result.error
        line = Text.assemble(("ERROR", "fan.error"), (f"  {result.op}", "fan.op"))
        if err is not None:
            line.append(f" [{err.code}]", style="fan.key")
        line.append(f" — {err.message if err else 'Unknown error'}")
        self.print(line)
        if self.verbose and err is not None and err.detail:
            self.print(Text("  detail:", style="dim"))
            for key, value in err.detail.items():
                self.print(f"    {key}: {value}")

    def meta(self, result: ServiceResult) -> None:
        if not self.verbose or not result.meta:
            return
        self.print()
        self.print(Text("  meta:", style="dim"))
        for key, value in result.meta.items():
            if key == "telemetry":
                self.print(_span_tree(value))
            else:
                self.print(f"    {key}: {value}")


def _span_label(span: dict[str, Any]) -> Text:
    ms = span.get("duration_ms", 0.0)
    style = "bold red" if ms > 1000 else "yellow" if ms > 100 else "dim"
    label = Text.assemble((f"{ms:.2f}ms", style), f"  {span.get('name', '?')}")
    notes = span.get("annotations") or {}
    if notes:
        label.append("  (" + ", ".join(f"{k}={v}" for k, v in notes.items()) + ")", "dim")
    return label


def _span_tree(span: dict[str, Any], tree: Tree | None = None) -> Tree:
    node = Tree(_span_label(span)) if tree is None else tree.add(_span_label(span))
    for child in span.get("children", []):
        _span_tree(child, node)
    return node


def _table(*columns: tuple[str, str]) -> Table:
    table = Table(pad_edge=False)
    for header, style in columns:
        table.add_column(header, style=style, no_wrap=True)
    return table


# ── Renderers ─────────────────────────────────────────────────────────

_FIELDS: dict[str, tuple[str, ...]] = {
    "init_registry": ("owner", "self_enrollment_allowed", "path"),
    "get_state": ("owner", "self_enrollment_allowed"),
    "enroll": ("recipient", "actor", "restored_receipts"),
    "remove": ("recipient", "actor", "archived_receipts"),
    "upgrade": ("applied_count", "pending_count", "current", "head", "backup_path", "message"),
}


def _fields(out: _Out, result: ServiceResult) -> None:
    out.ok(result)
    for key in _FIELDS[result.op]:
        if key in result.data:
            out.field(key, result.data[key])
    if out.verbose:
        for rev in result.data.get("pending", []):
            out.print(f"  {rev['revision']}: {rev['description']}")


def _deposit(out: _Out, result: ServiceResult) -> None:
    d = result.data
    out.ok(result)
    out.field("depositor", d["depositor"])
    out.field("funds", format_coins(d["funds"]))
    out.field("recipients", d["count"])

    table = _table(("Recipient", "fan.id"), ("Funds", "fan.amount"))
    for transfer in d["transfers"]:
        table.add_row(transfer["recipient"], format_coins(transfer["funds"]))
    out.print()
    out.print(table)

    dropped = [c for c in d.get("dropped", []) if c["amount"] > 0]
    if out.verbose and dropped:
        out.field("dropped", format_coins(dropped))


def _history(out: _Out, result: ServiceResult) -> None:
    d = result.data
    totals = ", ".join(f"{amount}{denom}" for denom, amount in d["totals"].items()) or "-"
    summary = f"status: {d['status']}\nreceipts: {d['count']}\ntotals: {totals}"
    out.print(
        Panel(
            summary,
            title=d["identity"],
            border_style=style_for_status(d["status"]) or "dim",
            expand=False,
        )
    )
    if d["receipts"]:
        table = _table(("#", "dim"), ("Funds", "fan.amount"))
        for n, bundle in enumerate(d["receipts"], start=1):
            table.add_row(str(n), format_coins(bundle))
        out.print(table)


def _members(out: _Out, result: ServiceResult) -> None:
    items = result.data["items"]
    table = _table(("Identity", "fan.id"))
    for identity in items:
        table.add_row(identity)
    out.print(table)
    out.print(f"\n{result.data.get('count', len(items))} identities")


def _generic(out: _Out, result: ServiceResult) -> None:
    out.ok(result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, separators=(",", ":"))
        out.field(key, value)


_RENDERERS: dict[str, Callable[[_Out, ServiceResult], None]] = {
    **dict.fromkeys(_FIELDS, _fields),
    "deposit": _deposit,
    "get_depositor": _history,
    "get_recipient": _history,
    "get_removed_recipient": _history,
    "list_recipients": _members,
    "list_removed_recipients": _members,
    "list_depositors": _members,
}
