"""Shared doubles for the throttling test-suite."""

from __future__ import annotations

from typing import Any, Mapping

BASE_TIME = 1_700_000_000.0


class FakeClock:
    def __init__(self, start: float = BASE_TIME) -> None:
        self.value = start

    def now(self) -> float:
        return self.value

    def advance(self, seconds: float) -> float:
        self.value += seconds
        return self.value


class RecordingAlertSink:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def emit(self, name: str, payload: Mapping[str, Any]) -> None:
        self.calls.append((name, dict(payload)))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class DiagnosticRecorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, name: str, payload: dict[str, Any]) -> None:
        self.calls.append((name, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


def event(app: str | None = "svcA", pod: str | None = "pod-1", **extra: Any) -> dict[str, Any]:
    record: dict[str, Any] = dict(extra)
    if app is not None:
        record["kubernetes.labels.app"] = app
    if pod is not None:
        record["kubernetes.pod_name"] = pod
    return record
