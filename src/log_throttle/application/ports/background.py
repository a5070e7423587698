"""Port describing periodic background workers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BackgroundTaskPort(Protocol):
    """A worker woken on a fixed period until stopped."""

    def start(self) -> None:
        """Start the worker thread if it is not already running."""

    def stop(self, *, timeout: float | None = None) -> None:
        """Signal the worker to exit and wait for it."""

    def run_once(self) -> None:
        """Execute a single wake synchronously."""


__all__ = ["BackgroundTaskPort"]
