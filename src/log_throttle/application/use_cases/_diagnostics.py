"""Guarded diagnostic hook shared by the use cases and background workers."""

from __future__ import annotations

import logging
from typing import Any, Callable

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None

logger = logging.getLogger(__name__)


def build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Callable[[str, dict[str, Any]], None]:
    """Return a callable that forwards to ``diagnostic`` and swallows its failures.

    Examples
    --------
    >>> seen = []
    >>> emit = build_diagnostic_emitter(lambda name, payload: seen.append((name, payload)))
    >>> emit("tick", {"count": 1})
    >>> seen
    [('tick', {'count': 1})]
    >>> build_diagnostic_emitter(None)("ignored", {})
    """

    if diagnostic is None:

        def _noop(name: str, payload: dict[str, Any]) -> None:
            return None

        return _noop

    def _emit(name: str, payload: dict[str, Any]) -> None:
        try:
            diagnostic(name, payload)
        except Exception as exc:  # noqa: BLE001
            logger.error("Diagnostic hook raised while reporting %s", name, exc_info=exc)

    return _emit


__all__ = ["DiagnosticHook", "build_diagnostic_emitter"]
