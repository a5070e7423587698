from __future__ import annotations

from log_throttle.domain.records import extract_field


def test_flat_dotted_key_wins_over_nested_path() -> None:
    record = {"kubernetes.pod_name": "flat", "kubernetes": {"pod_name": "nested"}}
    assert extract_field(record, "kubernetes.pod_name") == "flat"


def test_nested_path_is_traversed() -> None:
    record = {"kubernetes": {"labels": {"app": "svcA"}}}
    assert extract_field(record, "kubernetes.labels.app") == "svcA"


def test_missing_field_yields_none() -> None:
    assert extract_field({}, "kubernetes.pod_name") is None
    assert extract_field({"kubernetes": {"labels": {}}}, "kubernetes.labels.app") is None
    assert extract_field({"kubernetes": ["not", "a", "mapping"]}, "kubernetes.labels") is None


def test_plain_key_lookup() -> None:
    assert extract_field({"app": "svcA"}, "app") == "svcA"
