"""System clock adapter."""

from __future__ import annotations

import time

from log_throttle.application.ports.clock import ClockPort


class SystemClock(ClockPort):
    """Return wall-clock epoch seconds from :func:`time.time`."""

    def now(self) -> float:
        return time.time()


__all__ = ["SystemClock"]
