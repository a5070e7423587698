"""Field lookup on structured log records."""

from __future__ import annotations

from typing import Any, Mapping


def extract_field(record: Mapping[str, Any], path: str) -> Any:
    """Return the value stored under ``path`` or ``None`` when absent.

    Flat keys win: collectors often flatten nested documents into dotted keys
    such as ``kubernetes.pod_name``. When no flat key exists the dotted path is
    followed through nested mappings.

    Examples
    --------
    >>> extract_field({"kubernetes.pod_name": "pod-1"}, "kubernetes.pod_name")
    'pod-1'
    >>> extract_field({"kubernetes": {"labels": {"app": "svcA"}}}, "kubernetes.labels.app")
    'svcA'
    >>> extract_field({"kubernetes": "flat"}, "kubernetes.labels.app") is None
    True
    """
    if path in record:
        return record[path]
    current: Any = record
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current


__all__ = ["extract_field"]
