"""Thread-based periodic worker shared by the clock advancer and the reaper.

Purpose
-------
Run a callable once per period on a daemon thread until stopped, containing
every failure so an unattended loop never dies or wedges silently.

Contents
--------
* :class:`PeriodicWorker` - base implementation of :class:`BackgroundTaskPort`.

System Role
-----------
Background loops wait on a :class:`threading.Event` between wakes, so
:meth:`PeriodicWorker.stop` interrupts the sleep immediately instead of
waiting out the period.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

from log_throttle.application.ports.background import BackgroundTaskPort
from log_throttle.application.use_cases import DiagnosticHook, build_diagnostic_emitter

LOGGER = logging.getLogger(__name__)


class PeriodicWorker(BackgroundTaskPort, ABC):
    """Invoke :meth:`run_once` every ``period`` seconds on a background thread.

    Subclasses implement :meth:`run_once`. Exceptions raised by a wake are
    logged, reported as ``<name>_error`` diagnostics and counted in
    :attr:`failures`; the loop keeps running.
    """

    name = "periodic"

    def __init__(
        self,
        *,
        period: float,
        diagnostic: DiagnosticHook = None,
        stop_timeout: float | None = 5.0,
    ) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        self._period = period
        self._stop_timeout = stop_timeout
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._emit_diagnostic = build_diagnostic_emitter(diagnostic)
        self._failures = 0

    @property
    def period(self) -> float:
        return self._period

    @property
    def failures(self) -> int:
        """Return the number of wakes that raised."""
        return self._failures

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Start the background thread if it is not already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=f"log-throttle-{self.name}", daemon=True)
        self._thread.start()

    def stop(self, *, timeout: float | None = None) -> None:
        """Signal the loop to exit and join the thread.

        Raises
        ------
        RuntimeError
            When the thread is still alive after the timeout elapsed.
        """
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        effective_timeout = timeout if timeout is not None else self._stop_timeout
        thread.join(effective_timeout)
        if thread.is_alive():
            self._emit_diagnostic(f"{self.name}_shutdown_timeout", {"timeout": effective_timeout})
            raise RuntimeError(f"{self.name} worker failed to stop within the allotted timeout")
        self._thread = None

    @abstractmethod
    def run_once(self) -> None:
        """Perform one unit of periodic work."""

    def _run(self) -> None:
        """Internal loop: sleep one period, wake, repeat until stopped."""
        while not self._stop_event.wait(self._period):
            self.wake()

    def wake(self) -> None:
        """Run one wake, containing and reporting any failure."""
        try:
            self.run_once()
        except Exception as exc:  # noqa: BLE001
            self._failures += 1
            LOGGER.error("%s worker raised an exception; continuing", self.name, exc_info=exc)
            self._emit_diagnostic(f"{self.name}_error", {"exception": repr(exc)})

    def _report(self, name: str, payload: dict[str, Any]) -> None:
        self._emit_diagnostic(name, payload)


__all__ = ["PeriodicWorker"]
