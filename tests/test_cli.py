"""CLI behaviour coverage for the throttle command group."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner

from log_throttle import __init__conf__
from log_throttle import cli as cli_mod
from log_throttle import config as throttle_config

CONFIG_TOML = """
[groups.svcA]
max_rate = 1
window_size = 2
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "throttle.toml"
    path.write_text(CONFIG_TOML)
    return path


def _line(pod: str, ts: float | None = None, app: str = "svcA") -> str:
    record: dict[str, object] = {"kubernetes.labels.app": app, "kubernetes.pod_name": pod, "message": "hello"}
    if ts is not None:
        record["ts"] = ts
    return json.dumps(record)


def test_cli_without_subcommand_prints_summary() -> None:
    result = CliRunner().invoke(cli_mod.cli, [], prog_name=__init__conf__.shell_command)

    assert result.exit_code == 0
    assert result.output == cli_mod.summary_info()


def test_cli_info_command_matches_summary() -> None:
    result = CliRunner().invoke(cli_mod.cli, ["info"])

    assert result.exit_code == 0
    assert result.output == cli_mod.summary_info()
    assert f"Info for {__init__conf__.name}:" in result.output


def test_cli_version_option() -> None:
    result = CliRunner().invoke(cli_mod.cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"{__init__conf__.shell_command} version {__init__conf__.version}"


def test_cli_no_traceback_option(monkeypatch: pytest.MonkeyPatch) -> None:
    """`--no-traceback` disables verbose tracebacks for subsequent commands."""

    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", True, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", True, raising=False)

    result = CliRunner().invoke(cli_mod.cli, ["--no-traceback", "info"])

    assert result.exit_code == 0
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


def test_check_prints_policy_table(config_file: Path) -> None:
    result = CliRunner().invoke(cli_mod.cli, ["check", str(config_file)])

    assert result.exit_code == 0
    assert "svcA" in result.output
    assert "group_key=kubernetes.pod_name" in result.output
    assert "stale_after=60s" in result.output


def test_check_reads_config_env_var(config_file: Path) -> None:
    result = CliRunner().invoke(cli_mod.cli, ["check"], env={throttle_config.CONFIG_PATH_ENV_VAR: str(config_file)})
    assert result.exit_code == 0
    assert "svcA" in result.output


def test_check_reports_invalid_configuration(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text("[groups.svcA]\nmax_rate = 0\nwindow_size = 2\n")

    result = CliRunner().invoke(cli_mod.cli, ["check", str(path)])

    assert result.exit_code == 1
    assert "groups.svcA: max_rate must be positive" in result.output


def test_replay_in_simulated_time(config_file: Path) -> None:
    lines = [_line("pod-1", 100), _line("pod-1", 100), _line("pod-1", 100), _line("pod-1", 102), _line("pod-2", 102)]
    stdin = "\n".join(lines) + "\n"

    result = CliRunner().invoke(
        cli_mod.cli,
        ["replay", str(config_file), "-", "--time-field", "ts", "--no-alerts", "--no-summary"],
        input=stdin,
    )

    assert result.exit_code == 0
    assert result.stdout.splitlines() == [lines[0], lines[1], lines[3], lines[4]]


def test_replay_live_reads_file_and_prints_summary(config_file: Path, tmp_path: Path) -> None:
    events = tmp_path / "events.ndjson"
    lines = [_line("pod-1") for _ in range(3)] + [_line("pod-9", app="billing")]
    events.write_text("\n".join(lines) + "\n")

    result = CliRunner().invoke(cli_mod.cli, ["replay", str(config_file), str(events), "--no-alerts"])

    assert result.exit_code == 0
    assert lines[0] in result.output
    assert lines[3] in result.output
    assert "seen=4 over_limit=1" in result.output


def test_replay_skips_malformed_lines(config_file: Path) -> None:
    stdin = "not json\n[1, 2]\n\n" + _line("pod-1", 100) + "\n"

    result = CliRunner().invoke(
        cli_mod.cli,
        ["replay", str(config_file), "--time-field", "ts", "--no-alerts", "--no-summary"],
        input=stdin,
    )

    assert result.exit_code == 0
    assert "line 1: skipped, invalid JSON" in result.output
    assert "line 2: skipped, not a JSON object" in result.output
    assert _line("pod-1", 100) in result.output


def test_replay_prints_alerts(config_file: Path) -> None:
    stdin = "\n".join(_line("pod-1", 100) for _ in range(3)) + "\n"

    result = CliRunner().invoke(cli_mod.cli, ["replay", str(config_file), "--time-field", "ts", "--no-summary"], input=stdin)

    assert result.exit_code == 0
    assert "rate_exceeded" in result.output
    assert "group_key=pod-1" in result.output


def test_replay_requires_existing_config(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli_mod.cli, ["replay", str(tmp_path / "absent.toml")], input="")
    assert result.exit_code == 1
    assert "Configuration file not found" in result.output


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()
    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(throttle_config, "enable_dotenv", record_enable)
    monkeypatch.delenv(throttle_config.DOTENV_ENV_VAR, raising=False)

    result = runner.invoke(cli_mod.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    env = {throttle_config.DOTENV_ENV_VAR: "1"}
    result = runner.invoke(cli_mod.cli, ["info"], env=env)
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_mod.cli, ["--no-use-dotenv", "info"], env=env)
    assert result.exit_code == 0
    assert calls == []


def test_main_restores_traceback_preferences(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)

    recorded: dict[str, bool] = {}

    def fake_run_cli(command: Callable[..., int], argv: list[str] | None = None, *, prog_name: str | None = None, **_: object) -> int:
        result = CliRunner().invoke(command, argv or [])
        if result.exception is not None:
            raise result.exception
        recorded["traceback"] = lib_cli_exit_tools.config.traceback
        recorded["traceback_force_color"] = lib_cli_exit_tools.config.traceback_force_color
        return result.exit_code

    monkeypatch.setattr(lib_cli_exit_tools, "run_cli", fake_run_cli)

    exit_code = cli_mod.main(["--traceback", "info"])

    assert exit_code == 0
    assert recorded == {"traceback": True, "traceback_force_color": True}
    assert lib_cli_exit_tools.config.traceback is False
    assert lib_cli_exit_tools.config.traceback_force_color is False


def test_main_consumes_sys_argv(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback", False, raising=False)
    monkeypatch.setattr(lib_cli_exit_tools.config, "traceback_force_color", False, raising=False)
    monkeypatch.setattr(sys, "argv", [__init__conf__.shell_command, "info"], raising=False)

    exit_code = cli_mod.main()
    captured = capsys.readouterr()

    assert exit_code == 0
    assert f"Info for {__init__conf__.name}:" in captured.out
