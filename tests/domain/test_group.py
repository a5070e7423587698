from __future__ import annotations

from log_throttle.domain.group import GroupState
from log_throttle.domain.policy import GroupPolicy

T0 = 1_700_000_000.0


def _state() -> GroupState:
    return GroupState.create("pod-1", "svcA", GroupPolicy(max_rate=2, window_size=5, slide_interval=2), T0)


def test_create_seeds_window_from_policy() -> None:
    state = _state()
    assert state.window.size == 5
    assert state.window.total == 0
    assert state.slide_interval == 2
    assert state.last_warning_at is None
    assert (state.seen, state.dropped, state.exceeded, state.retired) == (0, 0, False, False)


def test_staleness_uses_strict_threshold() -> None:
    state = _state()
    assert state.is_stale(T0 + 60, 60) is False
    assert state.is_stale(T0 + 60.5, 60) is True


def test_warning_is_due_first_time_and_after_delay() -> None:
    state = _state()
    assert state.should_warn(T0, 10) is True
    state.last_warning_at = T0
    assert state.should_warn(T0 + 9.9, 10) is False
    assert state.should_warn(T0 + 10, 10) is True
