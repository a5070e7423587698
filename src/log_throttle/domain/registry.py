"""Registry of live :class:`GroupState` objects.

Purpose
-------
Map group-key values to their throttling state and keep a secondary index by
slide interval so the clock advancer can batch-advance every group sharing a
cadence without scanning the whole registry each tick.

Contents
--------
* :class:`GroupRegistry` - thread-safe dual index with lazy creation and stale
  removal.

System Role
-----------
Shared by the admission engine, the clock advancer and the reaper. Lock order
is registry lock first, group lock second; callers holding a group lock never
call back into the registry.
"""

from __future__ import annotations

import threading
from typing import Iterator

from .group import GroupState
from .policy import GroupPolicy


class GroupRegistry:
    """Own every :class:`GroupState`, indexed by key and by slide interval.

    Every state in :attr:`groups` appears in exactly one interval bucket keyed
    by its own ``slide_interval``; empty buckets are discarded.

    Examples
    --------
    >>> registry = GroupRegistry()
    >>> state = registry.get_or_create("pod-1", "svcA", GroupPolicy(max_rate=2, window_size=5), now=0.0)
    >>> registry.get("pod-1") is state, registry.intervals()
    (True, [1])
    >>> [removed.key for removed in registry.remove_stale(now=61.0, threshold=60.0)]
    ['pod-1']
    >>> len(registry), registry.intervals()
    (0, [])
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._groups: dict[str, GroupState] = {}
        self._by_slide_interval: dict[int, set[GroupState]] = {}

    def get(self, key: str) -> GroupState | None:
        with self._lock:
            return self._groups.get(key)

    def get_or_create(self, key: str, config_name: str, policy: GroupPolicy, *, now: float) -> GroupState:
        """Return the state for ``key``, creating and indexing it on first sight."""
        with self._lock:
            state = self._groups.get(key)
            if state is None:
                state = GroupState.create(key, config_name, policy, now)
                self._groups[key] = state
                self._by_slide_interval.setdefault(state.slide_interval, set()).add(state)
            return state

    def due(self, tick: int) -> list[GroupState]:
        """Return the groups whose slide interval divides ``tick``."""
        with self._lock:
            due: list[GroupState] = []
            for interval, states in self._by_slide_interval.items():
                if tick % interval == 0:
                    due.extend(states)
            return due

    def remove_stale(self, *, now: float, threshold: float) -> list[GroupState]:
        """Retire and unregister groups idle for more than ``threshold`` seconds.

        Staleness is read under each group's lock, so an admission that
        refreshed ``last_event_at`` before the check keeps the group alive.
        """
        removed: list[GroupState] = []
        with self._lock:
            for state in list(self._groups.values()):
                with state.lock:
                    if not state.is_stale(now, threshold):
                        continue
                    state.retired = True
                self._discard(state)
                removed.append(state)
        return removed

    def remove(self, key: str) -> GroupState | None:
        """Retire and unregister ``key`` regardless of its liveness."""
        with self._lock:
            state = self._groups.get(key)
            if state is None:
                return None
            with state.lock:
                state.retired = True
            self._discard(state)
            return state

    def snapshot(self) -> list[GroupState]:
        """Return the live states ordered by key."""
        with self._lock:
            return [self._groups[key] for key in sorted(self._groups)]

    def intervals(self) -> list[int]:
        with self._lock:
            return sorted(self._by_slide_interval)

    def _discard(self, state: GroupState) -> None:
        del self._groups[state.key]
        bucket = self._by_slide_interval.get(state.slide_interval)
        if bucket is not None:
            bucket.discard(state)
            if not bucket:
                del self._by_slide_interval[state.slide_interval]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._groups

    def __len__(self) -> int:
        with self._lock:
            return len(self._groups)

    def __iter__(self) -> Iterator[GroupState]:
        return iter(self.snapshot())


__all__ = ["GroupRegistry"]
