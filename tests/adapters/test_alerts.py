from __future__ import annotations

import logging
from io import StringIO

import pytest
from rich.console import Console

from log_throttle.adapters.alerts import LoggingAlertSink, RichConsoleAlertSink, format_alert

PAYLOAD = {
    "group_key": "pod-1",
    "config_name": "svcA",
    "rate": 4,
    "max_rate": 3,
    "window_size": 5,
    "slide_interval": 1,
    "dropped": 2,
    "notification_topic": None,
}


def test_format_alert_sorts_pairs_and_skips_missing_values() -> None:
    line = format_alert("rate_exceeded", PAYLOAD)
    assert line == "rate_exceeded config_name=svcA dropped=2 group_key=pod-1 max_rate=3 rate=4 slide_interval=1 window_size=5"


def test_format_alert_without_payload() -> None:
    assert format_alert("rate_back_down", {}) == "rate_back_down"


@pytest.mark.parametrize(
    ("name", "level"),
    [("rate_exceeded", logging.WARNING), ("rate_back_down", logging.INFO), ("unexpected", logging.WARNING)],
)
def test_logging_sink_levels(name: str, level: int, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="log_throttle.alerts")
    LoggingAlertSink().emit(name, PAYLOAD)

    [record] = caplog.records
    assert record.name == "log_throttle.alerts"
    assert record.levelno == level
    assert record.getMessage().startswith(name)
    assert record.throttle_alert == name  # type: ignore[attr-defined]
    assert record.throttle["group_key"] == "pod-1"  # type: ignore[attr-defined]


def test_logging_sink_accepts_custom_logger(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="host.pipeline")
    LoggingAlertSink(logging.getLogger("host.pipeline")).emit("rate_back_down", {"group_key": "pod-9"})
    assert [record.name for record in caplog.records] == ["host.pipeline"]


def _console() -> Console:
    return Console(file=StringIO(), record=True, force_terminal=True, color_system="truecolor", width=200)


def test_rich_sink_prints_plain_line() -> None:
    console = _console()
    RichConsoleAlertSink(console=console).emit("rate_exceeded", {"group_key": "[pod-1]", "rate": 4})
    assert console.export_text().strip() == "rate_exceeded group_key=[pod-1] rate=4"


def test_rich_sink_applies_style() -> None:
    console = _console()
    RichConsoleAlertSink(console=console).emit("rate_exceeded", {"group_key": "pod-1"})
    assert "\x1b[" in console.export_text(styles=True)


def test_rich_sink_no_color_suppresses_style() -> None:
    console = _console()
    RichConsoleAlertSink(console=console, no_color=True).emit("rate_exceeded", {"group_key": "pod-1"})
    assert "\x1b[" not in console.export_text(styles=True)


def test_rich_sink_style_override() -> None:
    console = _console()
    sink = RichConsoleAlertSink(console=console, styles={"rate_back_down": ""})
    sink.emit("rate_back_down", {"group_key": "pod-1"})
    assert "\x1b[" not in console.export_text(styles=True)
