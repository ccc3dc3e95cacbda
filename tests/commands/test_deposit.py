"""Tests for the deposit CLI command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy import select

from fanout.cli import cli
from fanout.infrastructure.database.engine import create_db_engine, db_path_for
from fanout.infrastructure.database.schema import event_wal


@pytest.fixture
def _two_recipients(cli_runner: CliRunner, _isolated_registry: None) -> None:
    for args in (
        ["init", "treasury"],
        ["enroll", "--as", "alice"],
        ["enroll", "--as", "bob"],
    ):
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output


@pytest.mark.usefixtures("_two_recipients")
class TestDepositCommand:
    def test_rich_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["deposit", "1000token", "--as", "sponsor"])
        assert result.exit_code == 0, result.output
        assert "alice" in result.stdout
        assert "500token" in result.stdout

    def test_json_transfers(self, cli_runner: CliRunner) -> None:
        args = ["--json", "deposit", "1000token,3uatom", "--as", "sponsor"]
        result = cli_runner.invoke(cli, args)
        data = json.loads(result.stdout)["data"]
        assert data["transfers"] == [
            {
                "recipient": "alice",
                "funds": [{"denom": "token", "amount": 500}, {"denom": "uatom", "amount": 1}],
            },
            {
                "recipient": "bob",
                "funds": [{"denom": "token", "amount": 500}, {"denom": "uatom", "amount": 1}],
            },
        ]

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "deposit", "10token", "--as", "sponsor"])
        assert result.stdout.strip() == "alice 5token\nbob 5token"

    def test_remainder_warning_on_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["deposit", "11token", "--as", "sponsor"])
        assert result.exit_code == 0
        assert "WARNING: Undistributed remainder: 1token" in result.stderr
        assert "WARNING" not in result.stdout

    def test_invalid_funds(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["deposit", "lots", "--as", "sponsor"])
        assert result.exit_code == 1
        assert "INVALID_BUNDLE" in result.stderr

    def test_transfer_log_plugin(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "fanout.toml").write_text("[plugins]\ntransfer_log = true\n")
        result = cli_runner.invoke(cli, ["--sync", "deposit", "10token", "--as", "sponsor"])
        assert result.exit_code == 0
        lines = (tmp_path / ".fanout" / "transfers.jsonl").read_text().splitlines()
        assert json.loads(lines[0])["depositor"] == "sponsor"

    def test_async_events_flushed_on_exit(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "fanout.toml").write_text("[plugins]\ntransfer_log = true\n")
        result = cli_runner.invoke(cli, ["deposit", "10token", "--as", "sponsor"])
        assert result.exit_code == 0
        assert (tmp_path / ".fanout" / "transfers.jsonl").is_file()


@pytest.mark.usefixtures("_isolated_registry")
class TestDepositWithoutRecipients:
    def test_no_recipients(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init", "treasury"])
        result = cli_runner.invoke(cli, ["deposit", "10token", "--as", "sponsor"])
        assert result.exit_code == 1
        assert "NO_RECIPIENTS" in result.stderr


_FAIL_ONCE_PLUGIN = """\
from pathlib import Path

import pluggy

hookimpl = pluggy.HookimplMarker("fanout")
MARKER = Path(__file__).with_suffix(".seen")


class FailOncePlugin:
    @hookimpl
    def post_deposit(self, depositor, recipients, count, transfers):
        if not MARKER.exists():
            MARKER.touch()
            raise RuntimeError("ledger sink offline")
"""

_ALWAYS_FAIL_PLUGIN = """\
import pluggy

hookimpl = pluggy.HookimplMarker("fanout")


class AlwaysFailPlugin:
    @hookimpl
    def post_deposit(self, depositor, recipients, count, transfers):
        raise RuntimeError("ledger sink gone")
"""


def _deposit_events(state_dir: Path) -> list[Any]:
    engine = create_db_engine(db_path_for(state_dir))
    try:
        with engine.connect() as conn:
            return conn.execute(
                select(event_wal.c.status, event_wal.c.retries).where(
                    event_wal.c.hook_name == "post_deposit"
                )
            ).all()
    finally:
        engine.dispose()


@pytest.mark.usefixtures("_two_recipients")
class TestFailedEventsRetriedOnExit:
    def test_failed_hook_completes_on_exit(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        state_dir = tmp_path / ".fanout"
        (state_dir / "plugins" / "fail_once.py").write_text(_FAIL_ONCE_PLUGIN)
        result = cli_runner.invoke(cli, ["--sync", "deposit", "10token", "--as", "sponsor"])
        assert result.exit_code == 0, result.output

        [row] = _deposit_events(state_dir)
        assert row.status == "completed"
        assert row.retries == 1

    def test_persistent_failure_becomes_dead_letter(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FANOUT_EVENTS__MAX_RETRIES", "2")
        state_dir = tmp_path / ".fanout"
        (state_dir / "plugins" / "always_fail.py").write_text(_ALWAYS_FAIL_PLUGIN)
        result = cli_runner.invoke(cli, ["--sync", "deposit", "10token", "--as", "sponsor"])
        assert result.exit_code == 0, result.output

        [row] = _deposit_events(state_dir)
        assert row.status == "dead_letter"
        assert row.retries == 2
