"""Behavioral tests for package metadata and the public surface."""

from __future__ import annotations

import runpy
import sys

import pytest

import log_throttle
from log_throttle import __init__conf__
from log_throttle.cli import summary_info


def test_summary_info_contains_metadata() -> None:
    summary = summary_info()
    assert "Info for log_throttle" in summary
    assert __init__conf__.version in summary
    assert summary.endswith("\n")


def test_summary_info_is_idempotent() -> None:
    assert summary_info() == summary_info()


def test_print_info_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    __init__conf__.print_info()
    captured = capsys.readouterr()
    assert captured.out == summary_info()
    assert captured.err == ""


def test_public_surface_is_importable() -> None:
    for name in log_throttle.__all__:
        assert getattr(log_throttle, name) is not None


def test_module_entry_point(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "argv", ["log_throttle", "info"])
    with pytest.raises(SystemExit) as excinfo:
        runpy.run_module("log_throttle", run_name="__main__")
    assert excinfo.value.code == 0
    assert "Info for log_throttle" in capsys.readouterr().out
