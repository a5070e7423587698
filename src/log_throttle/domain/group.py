"""Per-instance throttling state.

Purpose
-------
Bundle the sliding window of one rate-limited instance with its policy,
liveness timestamp, warning bookkeeping and diagnostic counters.

Contents
--------
* :class:`GroupState` - mutable state guarded by its own lock.

System Role
-----------
Owned by :class:`~log_throttle.domain.registry.GroupRegistry`. The admission
engine and the clock advancer mutate it while holding :attr:`GroupState.lock`
so readers never observe a window whose total disagrees with its buckets.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .policy import GroupPolicy
from .window import SlidingWindow


@dataclass(slots=True, eq=False)
class GroupState:
    """Rate-limiting state of one instance (``key``) under a configured group.

    Attributes
    ----------
    key:
        Group-key value identifying the instance, e.g. a pod name.
    config_name:
        Name of the configured group whose policy seeded this state.
    policy:
        Limits copied from configuration when the state was created.
    window:
        Sliding window counting admitted events.
    last_event_at:
        Arrival time of the latest admitted event; keeps the state alive.
    last_warning_at:
        Time of the latest ``rate_exceeded`` alert, ``None`` before the first.
    seen / dropped:
        Matching events observed and events classified over limit.
    exceeded:
        ``True`` while the instance is over its limit.
    retired:
        Set by the reaper once the state has been removed from the registry.
    """

    key: str
    config_name: str
    policy: GroupPolicy
    window: SlidingWindow
    last_event_at: float
    last_warning_at: float | None = None
    seen: int = 0
    dropped: int = 0
    exceeded: bool = False
    retired: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @classmethod
    def create(cls, key: str, config_name: str, policy: GroupPolicy, now: float) -> "GroupState":
        """Return fresh state with an empty window positioned at ``now``."""
        window = SlidingWindow(policy.window_size, current_timestamp=now)
        return cls(key=key, config_name=config_name, policy=policy, window=window, last_event_at=now)

    @property
    def slide_interval(self) -> int:
        return self.policy.slide_interval

    def is_stale(self, now: float, threshold: float) -> bool:
        """Return ``True`` when no event was admitted for more than ``threshold`` seconds."""
        return now - self.last_event_at > threshold

    def should_warn(self, now: float, delay: float) -> bool:
        """Return ``True`` when a new ``rate_exceeded`` alert is due."""
        return self.last_warning_at is None or now - self.last_warning_at >= delay


__all__ = ["GroupState"]
