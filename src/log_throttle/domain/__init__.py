"""Domain entities and value objects used by the throttling core."""

from __future__ import annotations

from .group import GroupState
from .policy import GroupPolicy, ThrottleSettings
from .records import extract_field
from .registry import GroupRegistry
from .window import SlidingWindow, TimeBucket

__all__ = [
    "GroupPolicy",
    "GroupRegistry",
    "GroupState",
    "SlidingWindow",
    "ThrottleSettings",
    "TimeBucket",
    "extract_field",
]
