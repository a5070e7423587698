"""Validated throttling policies and filter-wide settings.

Purpose
-------
Hold the configuration snapshot consumed by the throttling core as immutable
value objects that refuse invalid ranges at construction time.

Contents
--------
* :class:`GroupPolicy` - per configured group limits and drop behaviour.
* :class:`ThrottleSettings` - the policy table plus field selectors and timer
  cadences.

System Role
-----------
Configuration errors surface here as :class:`ValueError` before any event is
processed; :mod:`log_throttle.config` builds these objects from files and the
environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_GROUP_KEY = "kubernetes.pod_name"
DEFAULT_CONFIG_KEY = "kubernetes.labels.app"
DEFAULT_WARNING_DELAY = 10.0
DEFAULT_TICK_INTERVAL = 1.0
DEFAULT_SWEEP_INTERVAL = 30.0
DEFAULT_STALE_AFTER = 60.0


def _require_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def _require_positive_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return float(value)


@dataclass(slots=True, frozen=True)
class GroupPolicy:
    """Rate limit applied independently to every instance of one group.

    Attributes
    ----------
    max_rate:
        Approximate events per window slot at which a group is over limit.
    window_size:
        Number of one-second slots in the sliding window.
    slide_interval:
        Ticks between forced window advances for idle groups.
    drop_logs:
        ``True`` suppresses over-limit events, ``False`` passes them on while
        still reporting the overrun.
    """

    max_rate: int
    window_size: int
    slide_interval: int = 1
    drop_logs: bool = True

    def __post_init__(self) -> None:
        _require_positive_int("max_rate", self.max_rate)
        _require_positive_int("window_size", self.window_size)
        _require_positive_int("slide_interval", self.slide_interval)
        if not isinstance(self.drop_logs, bool):
            raise ValueError(f"drop_logs must be a boolean, got {self.drop_logs!r}")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "GroupPolicy":
        """Build a policy from a configuration table, rejecting unknown keys."""
        known = {"max_rate", "window_size", "slide_interval", "drop_logs"}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValueError(f"Unknown group settings: {', '.join(unknown)}")
        missing = sorted({"max_rate", "window_size"} - set(payload))
        if missing:
            raise ValueError(f"Missing group settings: {', '.join(missing)}")
        return cls(**dict(payload))


@dataclass(slots=True, frozen=True)
class ThrottleSettings:
    """Filter-wide configuration snapshot, read-only to the core."""

    groups: Mapping[str, GroupPolicy]
    group_key: str = DEFAULT_GROUP_KEY
    config_key: str = DEFAULT_CONFIG_KEY
    warning_delay: float = DEFAULT_WARNING_DELAY
    notification_topic: str | None = None
    tick_interval: float = DEFAULT_TICK_INTERVAL
    sweep_interval: float = DEFAULT_SWEEP_INTERVAL
    stale_after: float = DEFAULT_STALE_AFTER

    def __post_init__(self) -> None:
        for name, policy in self.groups.items():
            if not isinstance(name, str) or not name:
                raise ValueError("group names must be non-empty strings")
            if not isinstance(policy, GroupPolicy):
                raise ValueError(f"group {name!r} must be a GroupPolicy")
        if not isinstance(self.group_key, str) or not self.group_key.strip():
            raise ValueError("group_key must not be empty")
        if not isinstance(self.config_key, str) or not self.config_key.strip():
            raise ValueError("config_key must not be empty")
        object.__setattr__(self, "warning_delay", _require_positive_number("warning_delay", self.warning_delay))
        object.__setattr__(self, "tick_interval", _require_positive_number("tick_interval", self.tick_interval))
        object.__setattr__(self, "sweep_interval", _require_positive_number("sweep_interval", self.sweep_interval))
        object.__setattr__(self, "stale_after", _require_positive_number("stale_after", self.stale_after))
        object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))

    def policy_for(self, config_value: Any) -> GroupPolicy | None:
        """Return the policy configured for ``config_value`` or ``None``."""
        if not isinstance(config_value, str):
            return None
        return self.groups.get(config_value)


__all__ = [
    "DEFAULT_CONFIG_KEY",
    "DEFAULT_GROUP_KEY",
    "DEFAULT_STALE_AFTER",
    "DEFAULT_SWEEP_INTERVAL",
    "DEFAULT_TICK_INTERVAL",
    "DEFAULT_WARNING_DELAY",
    "GroupPolicy",
    "ThrottleSettings",
]
