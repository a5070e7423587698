"""Filter instance owning the registry, engine and background workers."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any, Mapping

from log_throttle.adapters import ClockAdvancer, Reaper
from log_throttle.application.ports import ClockPort
from log_throttle.application.use_cases import AdmissionEngine
from log_throttle.domain import GroupRegistry, ThrottleSettings


@dataclass(slots=True, frozen=True)
class GroupSnapshot:
    """Immutable view over one live group."""

    key: str
    config_name: str
    total: int
    size: int
    rate: int
    max_rate: int
    seen: int
    dropped: int
    exceeded: bool
    last_event_at: float


@dataclass(slots=True, frozen=True)
class FilterSnapshot:
    """Immutable view over the filter counters and its live groups."""

    total_seen: int
    total_dropped: int
    ticks: int
    running: bool
    groups: tuple[GroupSnapshot, ...]


@dataclass(slots=True)
class ThrottleFilter:
    """Aggregate of live collaborators assembled by :func:`build_filter`.

    All registry and window state belongs to this instance; the background
    workers receive the registry by reference at construction and stop with
    :meth:`shutdown`.
    """

    settings: ThrottleSettings
    registry: GroupRegistry
    engine: AdmissionEngine
    ticker: ClockAdvancer
    reaper: Reaper
    clock: ClockPort

    def start(self) -> "ThrottleFilter":
        """Start the clock advancer and the reaper threads."""
        self.ticker.start()
        self.reaper.start()
        return self

    def shutdown(self, *, timeout: float | None = None) -> None:
        """Stop both background workers; state stays inspectable afterwards."""
        errors: list[RuntimeError] = []
        for worker in (self.ticker, self.reaper):
            try:
                worker.stop(timeout=timeout)
            except RuntimeError as exc:
                errors.append(exc)
        if errors:
            raise errors[0]

    @property
    def running(self) -> bool:
        return self.ticker.running or self.reaper.running

    def filter(
        self,
        record: Mapping[str, Any],
        *,
        tag: str | None = None,
        time: float | None = None,
    ) -> Mapping[str, Any] | None:
        """Return ``record`` unchanged when admitted or ``None`` to drop it.

        ``tag`` is accepted for pipeline compatibility and does not influence
        the decision. ``time`` is the ingest time in epoch seconds.
        """
        return self.engine.admit(record, arrival=time)

    def inspect(self) -> FilterSnapshot:
        """Return a consistent read-only snapshot of counters and groups."""
        groups: list[GroupSnapshot] = []
        for state in self.registry.snapshot():
            with state.lock:
                groups.append(
                    GroupSnapshot(
                        key=state.key,
                        config_name=state.config_name,
                        total=state.window.total,
                        size=state.window.size,
                        rate=state.window.rate(),
                        max_rate=state.policy.max_rate,
                        seen=state.seen,
                        dropped=state.dropped,
                        exceeded=state.exceeded,
                        last_event_at=state.last_event_at,
                    )
                )
        return FilterSnapshot(
            total_seen=self.engine.total_seen,
            total_dropped=self.engine.total_dropped,
            ticks=self.ticker.ticks,
            running=self.running,
            groups=tuple(groups),
        )

    def __enter__(self) -> "ThrottleFilter":
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()


__all__ = ["FilterSnapshot", "GroupSnapshot", "ThrottleFilter"]
