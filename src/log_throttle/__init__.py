"""Public package surface of the log throttling filter.

Hosts build a filter from validated settings and call
:meth:`ThrottleFilter.filter` once per record; ``None`` means drop.
"""

from __future__ import annotations

from .config import load_settings, settings_from_mapping
from .domain import GroupPolicy, SlidingWindow, ThrottleSettings
from .runtime import FilterSnapshot, GroupSnapshot, ThrottleFilter, build_filter

__all__ = [
    "FilterSnapshot",
    "GroupPolicy",
    "GroupSnapshot",
    "SlidingWindow",
    "ThrottleFilter",
    "ThrottleSettings",
    "build_filter",
    "load_settings",
    "settings_from_mapping",
]
