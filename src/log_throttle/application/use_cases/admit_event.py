"""Use case deciding whether a single log record may pass downstream.

Purpose
-------
Classify each record into a configured group, lazily materialise the
per-instance state, compare the approximate window rate with the policy and
return the verdict.

Contents
--------
* :class:`AdmissionEngine` - the per-event entry point.

System Role
-----------
Invoked synchronously on the event hot path by
:class:`log_throttle.runtime.ThrottleFilter`. The engine fails open: any
internal error is logged and the record passes unchanged.

Alignment Notes
---------------
The rate is ``window.total // window.size``. Integer truncation under-reports
young windows and sets the observable drop boundary, so it must not be
replaced with a floating-point average.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Mapping

from log_throttle.application.ports import AlertSinkPort, ClockPort
from log_throttle.domain import GroupRegistry, GroupState, ThrottleSettings, extract_field

from ._diagnostics import DiagnosticHook, build_diagnostic_emitter

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class _Decision:
    admitted: bool
    over_limit: bool
    alert: tuple[str, dict[str, Any]] | None


class AdmissionEngine:
    """Admit or suppress records according to per-instance sliding windows.

    Examples
    --------
    >>> from log_throttle.domain import GroupPolicy
    >>> class FixedClock:
    ...     def now(self) -> float:
    ...         return 1_700_000_000.0
    >>> class Silent:
    ...     def emit(self, name, payload) -> None:
    ...         pass
    >>> settings = ThrottleSettings(groups={"svcA": GroupPolicy(max_rate=1, window_size=2)})
    >>> engine = AdmissionEngine(settings=settings, registry=GroupRegistry(), clock=FixedClock(), alerts=Silent())
    >>> record = {"kubernetes.labels.app": "svcA", "kubernetes.pod_name": "pod-1"}
    >>> [engine.admit(record) is record for _ in range(3)]
    [True, True, False]
    >>> engine.admit({"kubernetes.labels.app": "other"})
    {'kubernetes.labels.app': 'other'}
    """

    def __init__(
        self,
        *,
        settings: ThrottleSettings,
        registry: GroupRegistry,
        clock: ClockPort,
        alerts: AlertSinkPort,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._clock = clock
        self._alerts = alerts
        self._emit_diagnostic = build_diagnostic_emitter(diagnostic)
        self._totals_lock = threading.Lock()
        self._total_seen = 0
        self._total_dropped = 0

    @property
    def total_seen(self) -> int:
        """Return the number of records offered to :meth:`admit`."""
        with self._totals_lock:
            return self._total_seen

    @property
    def total_dropped(self) -> int:
        """Return the number of records classified over limit."""
        with self._totals_lock:
            return self._total_dropped

    def admit(self, record: Record, *, arrival: float | None = None) -> Record | None:
        """Return ``record`` when admitted, ``None`` when it must be dropped.

        Parameters
        ----------
        record:
            Structured log record; dotted field paths are resolved by
            :func:`~log_throttle.domain.extract_field`.
        arrival:
            Ingest time in epoch seconds. Defaults to the engine clock.
        """
        try:
            return self._admit(record, arrival)
        except Exception as exc:  # noqa: BLE001
            logger.error("Admission failed; passing record through unchanged", exc_info=exc)
            self._emit_diagnostic("admission_error", {"exception": repr(exc)})
            return record

    def _admit(self, record: Record, arrival: float | None) -> Record | None:
        now = self._clock.now() if arrival is None else arrival
        with self._totals_lock:
            self._total_seen += 1

        config_name = extract_field(record, self._settings.config_key)
        policy = self._settings.policy_for(config_name)
        if policy is None:
            return record

        key = self._group_key(record, config_name)
        while True:
            state = self._registry.get_or_create(key, config_name, policy, now=now)
            with state.lock:
                if state.retired:
                    continue
                decision = self._decide(state, now)
            break

        if decision.over_limit:
            with self._totals_lock:
                self._total_dropped += 1
        if decision.alert is not None:
            self._publish(*decision.alert)
        return record if decision.admitted else None

    def _publish(self, name: str, payload: dict[str, Any]) -> None:
        try:
            self._alerts.emit(name, payload)
        except Exception as exc:  # noqa: BLE001
            logger.error("Alert sink raised while reporting %s", name, exc_info=exc)
            self._emit_diagnostic("alert_error", {"alert": name, "exception": repr(exc)})

    def _group_key(self, record: Record, config_name: str) -> str:
        """Return the instance key; records lacking one share a key per configured group."""
        value = extract_field(record, self._settings.group_key)
        if value is None:
            return f"{config_name}:"
        return value if isinstance(value, str) else str(value)

    def _decide(self, state: GroupState, now: float) -> _Decision:
        """Apply the policy to ``state``; the caller holds ``state.lock``."""
        state.seen += 1
        window = state.window
        rate = window.rate()
        logger.debug(
            "group=%s seen=%d dropped=%d rate=%d total=%d",
            state.key,
            state.seen,
            state.dropped,
            rate,
            window.total,
        )

        if rate >= state.policy.max_rate:
            state.dropped += 1
            state.exceeded = True
            logger.debug("Rate limit exceeded for group %s (rate=%d, max_rate=%d)", state.key, rate, state.policy.max_rate)
            alert = None
            if state.should_warn(now, self._settings.warning_delay):
                state.last_warning_at = now
                alert = ("rate_exceeded", self._alert_payload(state, rate))
            return _Decision(admitted=not state.policy.drop_logs, over_limit=True, alert=alert)

        alert = None
        if state.exceeded:
            state.exceeded = False
            alert = ("rate_back_down", self._alert_payload(state, rate))
        state.last_event_at = now
        window.add(window.current_timestamp, 1)
        return _Decision(admitted=True, over_limit=False, alert=alert)

    def _alert_payload(self, state: GroupState, rate: int) -> dict[str, Any]:
        return {
            "group_key": state.key,
            "config_name": state.config_name,
            "rate": rate,
            "max_rate": state.policy.max_rate,
            "window_size": state.policy.window_size,
            "slide_interval": state.policy.slide_interval,
            "dropped": state.dropped,
            "notification_topic": self._settings.notification_topic,
        }


__all__ = ["AdmissionEngine", "Record"]
