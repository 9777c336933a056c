from __future__ import annotations

import io
import json
from dataclasses import replace

import grpc
import pytest

from pachctl import __version__
from pachctl.cli import main as cli_main
from pachctl.domain.version import Version
from pachctl.settings import RuntimeSettings
from tests._fakes import FakeClusterAdmin, FakeRpcError, FakeVersionSource


def test_version_reports_both_components(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli_main, "_version_source", lambda args: FakeVersionSource(Version(1, 4, 8)))
    assert cli_main.main(["version"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["COMPONENT", "VERSION"]
    assert lines[1].split() == ["pachctl", __version__]
    assert lines[2].split() == ["pachd", "1.4.8"]


def test_version_unreachable_server(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli_main, "_version_source", lambda args: FakeVersionSource(error=FakeRpcError("connection refused")))
    assert cli_main.main(["version"]) == 1
    captured = capsys.readouterr()
    assert "pachctl" in captured.out
    assert "error connecting to pachd server at address (127.0.0.1:30650): connection refused" in captured.err
    assert "kubectl get all" in captured.err


@pytest.mark.parametrize("answer, deleted", [("y\n", 1), ("n\n", 0)])
def test_delete_all_confirmation(
    answer: str,
    deleted: int,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    admin = FakeClusterAdmin()
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: admin)
    monkeypatch.setattr("sys.stdin", io.StringIO(answer))
    assert cli_main.main(["delete-all"]) == 0
    assert admin.deleted == deleted
    assert "Are you sure" in capsys.readouterr().out


def test_delete_all_read_failure(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    admin = FakeClusterAdmin()
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: admin)
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert cli_main.main(["delete-all"]) == 1
    assert admin.deleted == 0
    assert "unable to read confirmation" in capsys.readouterr().err


def test_garbage_collect_surfaces_sanitized_error(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    admin = FakeClusterAdmin(error=FakeRpcError("cannot run gc while there are active jobs", grpc.StatusCode.FAILED_PRECONDITION))
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: admin)
    assert cli_main.main(["garbage-collect"]) == 1
    err = capsys.readouterr().err
    assert "error: cannot run gc while there are active jobs" in err
    assert "_InactiveRpcError" not in err


def test_garbage_collect_success(monkeypatch: pytest.MonkeyPatch) -> None:
    admin = FakeClusterAdmin()
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: admin)
    assert cli_main.main(["garbage-collect"]) == 0
    assert admin.collected == 1


def test_usage_events_recorded(monkeypatch: pytest.MonkeyPatch, cli_settings: RuntimeSettings) -> None:
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: FakeClusterAdmin())
    assert cli_main.main(["garbage-collect"]) == 0
    events = [json.loads(line) for line in cli_settings.telemetry_file.read_text(encoding="utf-8").splitlines()]
    assert [e["status"] for e in events] == ["start", "success"]
    assert all(e["component"] == "garbage-collect" for e in events)


def test_no_metrics_suppresses_usage_events(monkeypatch: pytest.MonkeyPatch, cli_settings: RuntimeSettings) -> None:
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: FakeClusterAdmin())
    assert cli_main.main(["--no-metrics", "garbage-collect"]) == 0
    assert not cli_settings.telemetry_file.exists()


def test_flags_accepted_after_subcommand(monkeypatch: pytest.MonkeyPatch, cli_settings: RuntimeSettings) -> None:
    admin = FakeClusterAdmin()
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: admin)
    assert cli_main.main(["garbage-collect", "--no-metrics", "-v"]) == 0
    assert admin.collected == 1
    assert not cli_settings.telemetry_file.exists()


def test_flags_before_subcommand_survive_subparser_defaults() -> None:
    parser = cli_main.build_parser("127.0.0.1:30650")
    args = parser.parse_args(["--verbose", "--no-metrics", "version"])
    assert args.verbose is True
    assert args.no_metrics is True
    args = parser.parse_args(["version"])
    assert args.verbose is False
    assert args.no_metrics is False


@pytest.mark.parametrize("command, stdin", [("delete-all", "y\n"), ("garbage-collect", "")])
def test_unreachable_cluster_names_address(
    command: str,
    stdin: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    admin = FakeClusterAdmin(error=FakeRpcError("failed to connect to all addresses"))
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: admin)
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin))
    assert cli_main.main([command]) == 1
    err = capsys.readouterr().err
    assert "error connecting to pachd server at address (127.0.0.1:30650)" in err
    assert "failed to connect to all addresses" in err


def test_unwritable_log_dir_does_not_fail_command(
    monkeypatch: pytest.MonkeyPatch,
    cli_settings: RuntimeSettings,
    tmp_path,
) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setattr(cli_main, "SETTINGS", replace(cli_settings, log_dir=blocker / "logs"))
    admin = FakeClusterAdmin()
    monkeypatch.setattr(cli_main, "_cluster_admin", lambda args: admin)
    assert cli_main.main(["garbage-collect"]) == 0
    assert admin.collected == 1
