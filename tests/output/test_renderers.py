"""Tests for operation-specific Rich renderers."""

from fanout.output.renderers import format_coins, render_quiet, render_result
from fanout.services.result import ServiceError, ServiceResult

_TOKEN5 = [{"denom": "token", "amount": 5}]


def _deposit_result(**overrides) -> ServiceResult:
    data = {
        "depositor": "sponsor",
        "funds": [{"denom": "token", "amount": 11}],
        "recipients": ["alice", "bob"],
        "count": 2,
        "transfers": [
            {"recipient": "alice", "funds": _TOKEN5},
            {"recipient": "bob", "funds": _TOKEN5},
        ],
        "dropped": [{"denom": "token", "amount": 1}],
    }
    data.update(overrides)
    return ServiceResult(ok=True, op="deposit", data=data)


class TestFormatCoins:
    def test_multi(self) -> None:
        assert format_coins(_TOKEN5 + [{"denom": "uatom", "amount": 0}]) == "5token,0uatom"

    def test_empty(self) -> None:
        assert format_coins([]) == "-"


class TestRenderResult:
    def test_init(self) -> None:
        result = ServiceResult(
            ok=True,
            op="init_registry",
            data={"owner": "treasury", "self_enrollment_allowed": True, "path": "/x/fanout.db"},
        )
        output = render_result(result)
        assert output.startswith("OK")
        assert "owner: treasury" in output
        assert "path: /x/fanout.db" in output

    def test_membership(self) -> None:
        result = ServiceResult(
            ok=True,
            op="enroll",
            data={"recipient": "alice", "actor": "treasury", "restored_receipts": 2},
        )
        output = render_result(result)
        assert "recipient: alice" in output
        assert "restored_receipts: 2" in output

    def test_deposit_table(self) -> None:
        output = render_result(_deposit_result())
        assert "Recipient" in output
        assert "alice" in output
        assert "5token" in output
        assert "recipients: 2" in output
        assert "dropped" not in output

    def test_deposit_verbose_shows_dropped(self) -> None:
        output = render_result(_deposit_result(), verbose=True)
        assert "dropped: 1token" in output

    def test_history_panel(self) -> None:
        result = ServiceResult(
            ok=True,
            op="get_recipient",
            data={
                "identity": "alice",
                "status": "active",
                "receipts": [_TOKEN5, _TOKEN5],
                "count": 2,
                "totals": {"token": 10},
            },
        )
        output = render_result(result)
        assert "alice" in output
        assert "status: active" in output
        assert "totals: 10token" in output

    def test_members(self) -> None:
        result = ServiceResult(
            ok=True, op="list_depositors", data={"count": 1, "items": ["sponsor"]}
        )
        output = render_result(result)
        assert "sponsor" in output
        assert "1 identities" in output

    def test_upgrade(self) -> None:
        result = ServiceResult(
            ok=True,
            op="upgrade",
            data={
                "pending_count": 1,
                "pending": [{"revision": "001_baseline", "description": "Baseline"}],
                "current": None,
                "head": "001_baseline",
            },
        )
        output = render_result(result, verbose=True)
        assert "pending_count: 1" in output
        assert "001_baseline: Baseline" in output

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="mystery", data={"a": 1, "b": [1, 2]})
        output = render_result(result)
        assert "a: 1" in output
        assert "b: [1,2]" in output

    def test_error(self) -> None:
        result = ServiceResult(
            ok=False,
            op="enroll",
            error=ServiceError(
                code="UNAUTHORIZED", message="nope", detail={"actor": "bob", "target": "eve"}
            ),
        )
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "[UNAUTHORIZED]" in output
        assert "nope" in output
        assert "actor" not in output
        assert "actor: bob" in render_result(result, verbose=True)

    def test_verbose_meta_tree(self) -> None:
        result = ServiceResult(
            ok=True,
            op="enroll",
            data={"recipient": "alice", "actor": "alice", "restored_receipts": 0},
            meta={
                "telemetry": {
                    "name": "MembershipService.enroll",
                    "duration_ms": 1.5,
                    "children": [{"name": "authorize", "duration_ms": 0.2}],
                }
            },
        )
        output = render_result(result, verbose=True)
        assert "MembershipService.enroll" in output
        assert "authorize" in output


class TestRenderQuiet:
    def test_listing(self) -> None:
        result = ServiceResult(ok=True, op="list_recipients", data={"items": ["a.b", "c.d"]})
        assert render_quiet(result) == "a.b\nc.d"

    def test_deposit(self) -> None:
        assert render_quiet(_deposit_result()) == "alice 5token\nbob 5token"

    def test_plain_ok(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="enroll")) == "OK: enroll"

    def test_error(self) -> None:
        result = ServiceResult(
            ok=False, op="deposit", error=ServiceError(code="NO_RECIPIENTS", message="empty")
        )
        assert render_quiet(result) == "ERROR: deposit — empty"
