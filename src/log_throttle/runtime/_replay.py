"""Deterministic replay of recorded events through a filter.

Purpose
-------
Evaluate a throttling configuration against captured traffic without waiting
in real time: a :class:`ReplayClock` follows the event timestamps and the
clock advancer and reaper are stepped synchronously as simulated time passes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

from log_throttle.domain import extract_field

from ._filter import ThrottleFilter

LOGGER = logging.getLogger(__name__)

MAX_CATCH_UP_TICKS = 3600


class ReplayClock:
    """Manually advanced clock used while replaying recorded events."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def set(self, value: float) -> None:
        self._now = value


@dataclass(slots=True, frozen=True)
class ReplayOutcome:
    """Verdict for one replayed record."""

    record: Mapping[str, Any]
    admitted: bool
    timestamp: float


def replay_records(
    throttle: ThrottleFilter,
    clock: ReplayClock,
    records: Iterable[Mapping[str, Any]],
    *,
    time_field: str,
) -> Iterator[ReplayOutcome]:
    """Yield one :class:`ReplayOutcome` per record in input order.

    Records lacking a numeric ``time_field`` reuse the current simulated time.
    Gaps longer than :data:`MAX_CATCH_UP_TICKS` ticks skip the surplus ticks,
    which leaves the windows as aged as the catch-up allowed; the sweeps
    falling after the last replayed tick are merged into one sweep at the
    event time.
    """
    settings = throttle.settings
    next_tick: float | None = None
    next_sweep: float | None = None
    for record in records:
        ts = _event_time(record, time_field)
        if ts is None:
            ts = clock.now()
        if next_tick is None or next_sweep is None:
            clock.set(ts)
            next_tick = ts + settings.tick_interval
            next_sweep = ts + settings.sweep_interval
        caught_up = 0
        while True:
            tick_due = next_tick <= ts and caught_up < MAX_CATCH_UP_TICKS
            sweep_due = next_sweep <= ts and next_sweep <= next_tick
            if not (tick_due or sweep_due):
                break
            if tick_due and (not sweep_due or next_tick <= next_sweep):
                clock.set(next_tick)
                throttle.ticker.wake()
                next_tick += settings.tick_interval
                caught_up += 1
            else:
                clock.set(next_sweep)
                throttle.reaper.wake()
                next_sweep += settings.sweep_interval
        if next_tick <= ts:
            LOGGER.debug("Skipped ticks up to %.3f after %d catch-up ticks", ts, caught_up)
            next_tick = ts + settings.tick_interval
        if next_sweep <= ts:
            # one sweep at ts reclaims everything the skipped sweeps would have
            clock.set(ts)
            throttle.reaper.wake()
            next_sweep = ts + settings.sweep_interval
        if ts > clock.now():
            clock.set(ts)
        verdict = throttle.filter(record, time=clock.now())
        yield ReplayOutcome(record=record, admitted=verdict is not None, timestamp=clock.now())


def _event_time(record: Mapping[str, Any], field: str) -> float | None:
    value = extract_field(record, field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


__all__ = ["MAX_CATCH_UP_TICKS", "ReplayClock", "ReplayOutcome", "replay_records"]
