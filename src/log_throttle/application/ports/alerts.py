"""Port for the sink receiving rate-state alerts."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class AlertSinkPort(Protocol):
    """Report rate transitions such as ``rate_exceeded`` and ``rate_back_down``."""

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        """Forward the alert ``name`` with its ``payload``."""


__all__ = ["AlertSinkPort"]
