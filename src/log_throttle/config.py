"""Configuration loading for the throttling filter.

Purpose
-------
Resolve :class:`~log_throttle.domain.ThrottleSettings` from a TOML file,
``THROTTLE_*`` environment overrides and an optional ``.env`` file.

Contents
--------
* :func:`load_settings` / :func:`settings_from_mapping` - build validated
  settings; every invalid value raises :class:`ValueError`.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - opt-in ``.env`` support
  that never overrides variables already present in the environment.

System Role
-----------
Configuration errors are fatal and surface here before a filter is built.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from dotenv import find_dotenv, load_dotenv

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11
    import tomli as tomllib  # type: ignore[no-redef]

from log_throttle.domain import GroupPolicy, ThrottleSettings

DOTENV_ENV_VAR = "THROTTLE_USE_DOTENV"
CONFIG_PATH_ENV_VAR = "THROTTLE_CONFIG"

_TRUTHY = {"1", "true", "yes", "on"}

_TOP_LEVEL_KEYS = frozenset(
    {
        "groups",
        "group_key",
        "config_key",
        "warning_delay",
        "notification_topic",
        "tick_interval",
        "sweep_interval",
        "stale_after",
    }
)

_ENV_OVERRIDES: Mapping[str, str] = {
    "THROTTLE_GROUP_KEY": "group_key",
    "THROTTLE_CONFIG_KEY": "config_key",
    "THROTTLE_WARNING_DELAY": "warning_delay",
    "THROTTLE_NOTIFICATION_TOPIC": "notification_topic",
}

_NUMERIC_KEYS = frozenset({"warning_delay", "tick_interval", "sweep_interval", "stale_after"})

_dotenv_loaded = False
_dotenv_path: Path | None = None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is enabled; an explicit flag wins.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv() -> Path | None:
    """Load the nearest ``.env`` walking up from the working directory.

    Existing environment variables keep precedence. Returns the loaded path,
    or ``None`` when no file was found. Subsequent calls are no-ops returning
    the first result.
    """
    global _dotenv_loaded, _dotenv_path
    if _dotenv_loaded:
        return _dotenv_path
    found = find_dotenv(usecwd=True)
    _dotenv_loaded = True
    if not found:
        _dotenv_path = None
        return None
    _dotenv_path = Path(found).resolve()
    load_dotenv(_dotenv_path, override=False)
    return _dotenv_path


def _reset_dotenv_state_for_testing() -> None:
    global _dotenv_loaded, _dotenv_path
    _dotenv_loaded = False
    _dotenv_path = None


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Parse a TOML configuration file into a plain dictionary."""
    config_path = Path(path)
    try:
        with config_path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ValueError(f"Configuration file not found: {config_path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {config_path}: {exc}") from exc


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ThrottleSettings:
    """Build settings from ``path`` (or ``THROTTLE_CONFIG``) plus environment overrides."""
    env = os.environ if environ is None else environ
    source = path if path is not None else env.get(CONFIG_PATH_ENV_VAR)
    data = read_config_file(source) if source else {}
    return settings_from_mapping(data, environ=env)


def settings_from_mapping(
    data: Mapping[str, Any],
    *,
    environ: Mapping[str, str] | None = None,
) -> ThrottleSettings:
    """Validate a raw configuration mapping and apply ``THROTTLE_*`` overrides.

    Examples
    --------
    >>> settings = settings_from_mapping(
    ...     {"groups": {"svcA": {"max_rate": 2, "window_size": 5}}},
    ...     environ={"THROTTLE_GROUP_KEY": "kubernetes.host"},
    ... )
    >>> settings.group_key, settings.groups["svcA"].window_size
    ('kubernetes.host', 5)
    """
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: dict[str, Any] = {key: value for key, value in data.items() if key != "groups"}
    groups_raw = data.get("groups", {})
    env = {} if environ is None else environ
    if env.get("THROTTLE_GROUPS"):
        groups_raw = _parse_groups_json(env["THROTTLE_GROUPS"])
    for variable, key in _ENV_OVERRIDES.items():
        raw = env.get(variable)
        if raw is None or raw == "":
            continue
        values[key] = _parse_number(variable, raw) if key in _NUMERIC_KEYS else raw

    return ThrottleSettings(groups=_build_groups(groups_raw), **values)


def _build_groups(raw: Any) -> dict[str, GroupPolicy]:
    if not isinstance(raw, Mapping):
        raise ValueError("groups must be a table of group names to settings")
    groups: dict[str, GroupPolicy] = {}
    for name, payload in raw.items():
        if not isinstance(payload, Mapping):
            raise ValueError(f"groups.{name} must be a table")
        try:
            groups[str(name)] = GroupPolicy.from_mapping(payload)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"groups.{name}: {exc}") from exc
    return groups


def _parse_groups_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"THROTTLE_GROUPS must be a JSON object: {exc}") from exc


def _parse_number(variable: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{variable} must be a number, got {raw!r}") from exc


__all__ = [
    "CONFIG_PATH_ENV_VAR",
    "DOTENV_ENV_VAR",
    "enable_dotenv",
    "load_settings",
    "read_config_file",
    "settings_from_mapping",
    "should_use_dotenv",
]
