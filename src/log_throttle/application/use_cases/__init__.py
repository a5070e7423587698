"""Use cases orchestrating the throttling core."""

from __future__ import annotations

from ._diagnostics import DiagnosticHook, build_diagnostic_emitter
from .admit_event import AdmissionEngine

__all__ = ["AdmissionEngine", "DiagnosticHook", "build_diagnostic_emitter"]
