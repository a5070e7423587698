"""Runtime façade composing the throttling filter.

Purpose
-------
Expose a stable entry point (:func:`build_filter`, :class:`ThrottleFilter`)
that hosts use instead of importing the inner layers directly.

Contents
--------
* ``build_filter`` - composition root for one filter instance.
* ``ThrottleFilter`` - per-event ``filter`` plus ``start``/``shutdown``.
* ``FilterSnapshot`` / ``GroupSnapshot`` - read-only observability views.
* ``replay_records`` - deterministic replay of recorded traffic.
"""

from __future__ import annotations

from ._composition import build_filter
from ._filter import FilterSnapshot, GroupSnapshot, ThrottleFilter
from ._replay import ReplayClock, ReplayOutcome, replay_records

__all__ = [
    "FilterSnapshot",
    "GroupSnapshot",
    "ReplayClock",
    "ReplayOutcome",
    "ThrottleFilter",
    "build_filter",
    "replay_records",
]
