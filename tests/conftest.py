from __future__ import annotations

import pytest

from tests._fakes import DiagnosticRecorder, FakeClock, RecordingAlertSink


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def alerts() -> RecordingAlertSink:
    return RecordingAlertSink()


@pytest.fixture
def diagnostics() -> DiagnosticRecorder:
    return DiagnosticRecorder()
