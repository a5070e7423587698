"""Background reaper reclaiming idle group state."""

from __future__ import annotations

import logging

from log_throttle.application.ports import ClockPort
from log_throttle.application.use_cases import DiagnosticHook
from log_throttle.domain import GroupRegistry

from .periodic import PeriodicWorker

LOGGER = logging.getLogger(__name__)


class Reaper(PeriodicWorker):
    """Remove groups with no admitted event for longer than ``stale_after``.

    Without the reaper the registry grows with every instance identity (pod,
    process) ever observed. A reaped instance starts from an empty window
    when it reappears.
    """

    name = "reaper"

    def __init__(
        self,
        *,
        registry: GroupRegistry,
        clock: ClockPort,
        period: float = 30.0,
        stale_after: float = 60.0,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        super().__init__(period=period, diagnostic=diagnostic)
        if stale_after <= 0:
            raise ValueError("stale_after must be positive")
        self._registry = registry
        self._clock = clock
        self._stale_after = stale_after

    @property
    def stale_after(self) -> float:
        return self._stale_after

    def sweep(self) -> list[str]:
        """Remove stale groups and return their keys."""
        now = self._clock.now()
        removed = [state.key for state in self._registry.remove_stale(now=now, threshold=self._stale_after)]
        if removed:
            LOGGER.info("Reaped %d idle group(s): %s", len(removed), ", ".join(removed))
            self._report("groups_reaped", {"keys": removed, "remaining": len(self._registry)})
        return removed

    def run_once(self) -> None:
        self.sweep()


__all__ = ["Reaper"]
