"""Command-line interface for inspecting and replaying throttle configurations.

Purpose
-------
Let operators validate a configuration file and measure its effect on
captured NDJSON traffic before deploying it into a pipeline.

Contents
--------
* :func:`cli` - Click group with ``info``, ``check`` and ``replay``.
* :func:`main` - entry point delegating to :mod:`lib_cli_exit_tools`.
* :func:`summary_info` - metadata banner shared with ``info``.

System Role
-----------
Presentation layer only: configuration errors are turned into Click errors,
all throttling decisions come from :mod:`log_throttle.runtime`.
"""

from __future__ import annotations

import json
import os
from typing import IO, Any, Iterator, Mapping, Sequence

import click
import lib_cli_exit_tools
from rich.console import Console
from rich.table import Table

from . import __init__conf__
from . import config as throttle_config
from .adapters import LoggingAlertSink, RichConsoleAlertSink
from .application.ports import AlertSinkPort
from .domain import ThrottleSettings
from .runtime import FilterSnapshot, ReplayClock, build_filter, replay_records

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Examples
    --------
    >>> banner = summary_info()
    >>> "version" in banner and banner.endswith("\\n")
    True
    """
    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from a nearby .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command storing global flags."""

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    env_toggle = os.getenv(throttle_config.DOTENV_ENV_VAR)
    if throttle_config.should_use_dotenv(explicit=explicit, env_value=env_toggle):
        throttle_config.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata so users can inspect installation details."""

    click.echo(summary_info(), nl=False)


@cli.command("check", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("config_path", required=False, type=click.Path(dir_okay=False))
def cli_check(config_path: str | None) -> None:
    """Validate CONFIG_PATH (or $THROTTLE_CONFIG) and print the policy table."""

    settings = _load(config_path)
    console = Console()
    console.print(_policy_table(settings))
    console.print(
        f"group_key={settings.group_key} config_key={settings.config_key} "
        f"warning_delay={settings.warning_delay:g}s stale_after={settings.stale_after:g}s",
        highlight=False,
        markup=False,
    )


@cli.command("replay", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("config_path", type=click.Path(dir_okay=False))
@click.argument("events", type=click.File("r"), default="-")
@click.option(
    "--time-field",
    default=None,
    help="Dotted field holding epoch seconds; replays in simulated time instead of real time.",
)
@click.option("--alerts/--no-alerts", default=True, help="Print rate alerts to stderr.")
@click.option("--summary/--no-summary", default=True, help="Print per-group counters to stderr when done.")
def cli_replay(config_path: str, events: IO[str], time_field: str | None, alerts: bool, summary: bool) -> None:
    """Filter NDJSON EVENTS (default: stdin) and write admitted lines to stdout."""

    settings = _load(config_path)
    err_console = Console(stderr=True)
    sink: AlertSinkPort = RichConsoleAlertSink(console=err_console) if alerts else LoggingAlertSink()

    if time_field is None:
        throttle = build_filter(settings, alerts=sink, start=True)
        try:
            for line, record in _read_records(events):
                if throttle.filter(record) is not None:
                    click.echo(line)
        finally:
            throttle.shutdown()
    else:
        clock = ReplayClock()
        throttle = build_filter(settings, clock=clock, alerts=sink)
        lines: dict[int, str] = {}

        def _records() -> Iterator[Mapping[str, Any]]:
            for line, record in _read_records(events):
                lines[id(record)] = line
                yield record

        for outcome in replay_records(throttle, clock, _records(), time_field=time_field):
            line = lines.pop(id(outcome.record))
            if outcome.admitted:
                click.echo(line)

    if summary:
        err_console.print(_summary_table(throttle.inspect()))


def _load(config_path: str | None) -> ThrottleSettings:
    try:
        return throttle_config.load_settings(config_path)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def _read_records(stream: IO[str]) -> Iterator[tuple[str, Mapping[str, Any]]]:
    for number, raw in enumerate(stream, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            click.echo(f"line {number}: skipped, invalid JSON ({exc.msg})", err=True)
            continue
        if not isinstance(record, dict):
            click.echo(f"line {number}: skipped, not a JSON object", err=True)
            continue
        yield line, record


def _policy_table(settings: ThrottleSettings) -> Table:
    table = Table(title="Throttle groups")
    table.add_column("group")
    table.add_column("max_rate", justify="right")
    table.add_column("window_size", justify="right")
    table.add_column("slide_interval", justify="right")
    table.add_column("on exceed")
    for name in sorted(settings.groups):
        policy = settings.groups[name]
        table.add_row(
            name,
            str(policy.max_rate),
            str(policy.window_size),
            str(policy.slide_interval),
            "drop" if policy.drop_logs else "pass",
        )
    return table


def _summary_table(snapshot: FilterSnapshot) -> Table:
    table = Table(title=f"seen={snapshot.total_seen} over_limit={snapshot.total_dropped}")
    table.add_column("instance")
    table.add_column("group")
    table.add_column("seen", justify="right")
    table.add_column("over_limit", justify="right")
    table.add_column("rate", justify="right")
    table.add_column("max_rate", justify="right")
    for group in snapshot.groups:
        table.add_row(
            group.key or "-",
            group.config_name,
            str(group.seen),
            str(group.dropped),
            str(group.rate),
            str(group.max_rate),
        )
    return table


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with error handling and return the exit code.

    Parameters
    ----------
    argv:
        Optional sequence of argument strings (defaults to ``sys.argv[1:]``).
    restore_traceback:
        Restore the traceback preferences of :mod:`lib_cli_exit_tools` after
        the run so embedding hosts keep their settings.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main", "summary_info"]
