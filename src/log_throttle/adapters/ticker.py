"""Background clock advancer rolling sliding windows forward.

Purpose
-------
Age every registered window even when its group sees no traffic, so old
activity decays out instead of freezing the last observed rate.

Contents
--------
* :class:`ClockAdvancer` - periodic worker inserting zero-valued buckets.

System Role
-----------
Wakes once per base tick (one second by default). On tick ``n`` every group
whose ``slide_interval`` divides ``n`` receives ``window.add(now, 0)`` under its
own lock.
"""

from __future__ import annotations

import logging

from log_throttle.application.ports import ClockPort
from log_throttle.application.use_cases import DiagnosticHook
from log_throttle.domain import GroupRegistry

from .periodic import PeriodicWorker

LOGGER = logging.getLogger(__name__)


class ClockAdvancer(PeriodicWorker):
    """Advance due windows once per tick.

    Examples
    --------
    >>> from log_throttle.domain import GroupPolicy
    >>> class Clock:
    ...     value = 100.0
    ...     def now(self) -> float:
    ...         return self.value
    >>> registry = GroupRegistry()
    >>> state = registry.get_or_create("pod-1", "svcA", GroupPolicy(max_rate=1, window_size=3, slide_interval=2), now=100.0)
    >>> clock = Clock()
    >>> advancer = ClockAdvancer(registry=registry, clock=clock)
    >>> clock.value = 101.0
    >>> advancer.run_once()
    >>> state.window.current_timestamp
    100.0
    >>> clock.value = 102.0
    >>> advancer.run_once()
    >>> advancer.ticks, state.window.current_timestamp
    (2, 102.0)
    """

    name = "ticker"

    def __init__(
        self,
        *,
        registry: GroupRegistry,
        clock: ClockPort,
        period: float = 1.0,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        super().__init__(period=period, diagnostic=diagnostic)
        self._registry = registry
        self._clock = clock
        self._ticks = 0

    @property
    def ticks(self) -> int:
        """Return the number of ticks processed so far."""
        return self._ticks

    def run_once(self) -> None:
        """Process one tick, advancing every group due at the new tick count."""
        self._ticks += 1
        now = self._clock.now()
        advanced = 0
        for state in self._registry.due(self._ticks):
            with state.lock:
                if state.retired:
                    continue
                state.window.add(now, 0)
            advanced += 1
        if advanced:
            LOGGER.debug("tick=%d advanced %d window(s)", self._ticks, advanced)


__all__ = ["ClockAdvancer"]
