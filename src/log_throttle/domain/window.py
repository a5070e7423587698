"""Fixed-size sliding time window counting events per whole second.

Purpose
-------
Track recent event counts for a single throttled group with bounded memory and
per-event cost, independent of traffic volume.

Contents
--------
* :class:`TimeBucket` - one slot holding the count observed during a second.
* :class:`SlidingWindow` - circular buffer of buckets with a cached total.

System Role
-----------
Leaf of the domain layer. :class:`~log_throttle.domain.group.GroupState` owns
one window; the admission engine appends events to it and the clock advancer
rolls it forward with zero-valued buckets so old activity decays out.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TimeBucket:
    """Event count observed during one whole-second slot."""

    timestamp: int = 0
    counter: int = 0


class SlidingWindow:
    """Circular buffer of :class:`TimeBucket` slots with a running total.

    Once every slot has been written, the next new second overwrites the
    oldest slot and its counter leaves :attr:`total`. Timestamps arriving out
    of order are not re-sorted; the window only approximates recency.

    Examples
    --------
    >>> window = SlidingWindow(size=3, current_timestamp=100.0)
    >>> window.add(100.2, 1)
    >>> window.add(100.9, 2)
    >>> window.total, window.lookup(100.0)
    (3, 0)
    >>> for second in (101, 102, 103):
    ...     window.add(second, 1)
    >>> window.total
    3
    >>> window.lookup(100) is None
    True
    """

    __slots__ = ("_size", "_table", "_cursor", "_total", "current_timestamp")

    def __init__(self, size: int, *, current_timestamp: float = 0.0) -> None:
        if size <= 0:
            raise ValueError("window_size must be positive")
        self._size = size
        self._table = [TimeBucket() for _ in range(size)]
        self._cursor: int | None = None
        self._total = 0
        self.current_timestamp = current_timestamp

    @property
    def size(self) -> int:
        """Return the fixed number of slots."""
        return self._size

    @property
    def total(self) -> int:
        """Return the sum of all bucket counters."""
        return self._total

    @property
    def cursor(self) -> int | None:
        """Return the index of the most recently written slot, if any."""
        return self._cursor

    def lookup(self, ts: float) -> int | None:
        """Return the index of the slot holding the second of ``ts``."""
        second = int(ts)
        for index, bucket in enumerate(self._table):
            if bucket.timestamp == second:
                return index
        return None

    def add(self, ts: float, value: int) -> None:
        """Record ``value`` events at ``ts``, evicting the oldest slot when needed."""
        self.current_timestamp = ts
        index = self.lookup(ts)
        if index is not None:
            self._table[index].counter += value
            self._total += value
            return

        if self._cursor is None or self._cursor == self._size - 1:
            self._cursor = 0
        else:
            self._cursor += 1
        bucket = self._table[self._cursor]
        self._total += value - bucket.counter
        bucket.timestamp = int(ts)
        bucket.counter = value

    def rate(self) -> int:
        """Return the average events per slot, truncated toward zero."""
        return self._total // self._size

    def snapshot(self) -> list[TimeBucket]:
        """Return copies of the slots in table order."""
        return [TimeBucket(bucket.timestamp, bucket.counter) for bucket in self._table]

    def __len__(self) -> int:
        return self._size


__all__ = ["SlidingWindow", "TimeBucket"]
