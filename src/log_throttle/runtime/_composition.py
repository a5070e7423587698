"""Runtime composition helpers wiring domain, application, and adapters.

Purpose
-------
Translate :class:`ThrottleSettings` into a live :class:`ThrottleFilter`. The
helpers keep wiring small, declarative, and testable: hosts and tests inject
their own clock or alert sink, everything else defaults to the production
adapters.
"""

from __future__ import annotations

from log_throttle.adapters import ClockAdvancer, LoggingAlertSink, Reaper, SystemClock
from log_throttle.application.ports import AlertSinkPort, ClockPort
from log_throttle.application.use_cases import AdmissionEngine, DiagnosticHook
from log_throttle.domain import GroupRegistry, ThrottleSettings

from ._filter import ThrottleFilter


def build_filter(
    settings: ThrottleSettings,
    *,
    clock: ClockPort | None = None,
    alerts: AlertSinkPort | None = None,
    diagnostic: DiagnosticHook = None,
    start: bool = False,
) -> ThrottleFilter:
    """Assemble a filter instance from resolved settings.

    Parameters
    ----------
    settings:
        Validated configuration snapshot.
    clock:
        Time source shared by the engine and both workers; defaults to
        :class:`SystemClock`.
    alerts:
        Sink for rate transitions; defaults to :class:`LoggingAlertSink`.
    diagnostic:
        Optional ``(name, payload)`` hook observing internal errors and reaps.
    start:
        When ``True`` the background workers are started before returning.
    """

    effective_clock: ClockPort = clock if clock is not None else SystemClock()
    registry = GroupRegistry()
    engine = AdmissionEngine(
        settings=settings,
        registry=registry,
        clock=effective_clock,
        alerts=_select_alert_sink(alerts),
        diagnostic=diagnostic,
    )
    ticker = ClockAdvancer(
        registry=registry,
        clock=effective_clock,
        period=settings.tick_interval,
        diagnostic=diagnostic,
    )
    reaper = Reaper(
        registry=registry,
        clock=effective_clock,
        period=settings.sweep_interval,
        stale_after=settings.stale_after,
        diagnostic=diagnostic,
    )
    throttle = ThrottleFilter(
        settings=settings,
        registry=registry,
        engine=engine,
        ticker=ticker,
        reaper=reaper,
        clock=effective_clock,
    )
    if start:
        throttle.start()
    return throttle


def _select_alert_sink(alerts: AlertSinkPort | None) -> AlertSinkPort:
    if alerts is not None:
        return alerts
    return LoggingAlertSink()


__all__ = ["build_filter"]
