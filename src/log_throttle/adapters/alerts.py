"""Alert sinks implementing :class:`AlertSinkPort`.

Purpose
-------
Deliver ``rate_exceeded`` and ``rate_back_down`` notifications either to the
host's :mod:`logging` tree or to a Rich console.

Contents
--------
* :class:`LoggingAlertSink` - default sink used by library hosts.
* :class:`RichConsoleAlertSink` - human-facing sink used by the CLI.
* :func:`format_alert` - one-line rendering shared by both sinks.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from rich.console import Console

from log_throttle.application.ports.alerts import AlertSinkPort

_LEVELS: Mapping[str, int] = {
    "rate_exceeded": logging.WARNING,
    "rate_back_down": logging.INFO,
}

#: Default Rich styles keyed by alert name.
_STYLE_MAP: Mapping[str, str] = {
    "rate_exceeded": "bold yellow",
    "rate_back_down": "green",
}


def format_alert(name: str, payload: Mapping[str, Any]) -> str:
    """Return ``name`` followed by sorted ``key=value`` pairs.

    Examples
    --------
    >>> format_alert("rate_exceeded", {"rate": 3, "group_key": "pod-1", "notification_topic": None})
    'rate_exceeded group_key=pod-1 rate=3'
    """
    pairs = " ".join(f"{key}={value}" for key, value in sorted(payload.items()) if value is not None)
    return f"{name} {pairs}" if pairs else name


class LoggingAlertSink(AlertSinkPort):
    """Forward alerts to a :class:`logging.Logger` with structured ``extra``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("log_throttle.alerts")

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        level = _LEVELS.get(name, logging.WARNING)
        self._logger.log(level, format_alert(name, payload), extra={"throttle_alert": name, "throttle": dict(payload)})


class RichConsoleAlertSink(AlertSinkPort):
    """Print alerts to a Rich console, styled per alert name."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        no_color: bool = False,
        styles: Mapping[str, str] | None = None,
    ) -> None:
        self._console = console if console is not None else Console(stderr=True, no_color=no_color)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        if styles:
            merged.update(styles)
        self._style_map = merged

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        """Print the alert line.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> RichConsoleAlertSink(console=console).emit("rate_back_down", {"group_key": "pod-1"})
        >>> console.export_text().strip()
        'rate_back_down group_key=pod-1'
        """
        style = "" if self._no_color else self._style_map.get(name, "")
        self._console.print(format_alert(name, payload), style=style, highlight=False, markup=False)


__all__ = ["LoggingAlertSink", "RichConsoleAlertSink", "format_alert"]
