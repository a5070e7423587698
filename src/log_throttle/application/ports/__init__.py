"""Protocols the application layer depends on."""

from __future__ import annotations

from .alerts import AlertSinkPort
from .background import BackgroundTaskPort
from .clock import ClockPort

__all__ = ["AlertSinkPort", "BackgroundTaskPort", "ClockPort"]
