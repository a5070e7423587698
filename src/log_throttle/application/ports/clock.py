"""Port for the wall clock driving windows and liveness checks."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockPort(Protocol):
    """Provide the current time as epoch seconds."""

    def now(self) -> float: ...


__all__ = ["ClockPort"]
