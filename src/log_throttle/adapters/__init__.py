"""Adapters wiring the throttling core to threads, clocks and sinks."""

from __future__ import annotations

from .alerts import LoggingAlertSink, RichConsoleAlertSink, format_alert
from .clock import SystemClock
from .periodic import PeriodicWorker
from .reaper import Reaper
from .ticker import ClockAdvancer

__all__ = [
    "ClockAdvancer",
    "LoggingAlertSink",
    "PeriodicWorker",
    "Reaper",
    "RichConsoleAlertSink",
    "SystemClock",
    "format_alert",
]
