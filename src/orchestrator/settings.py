"""Run settings resolved from defaults, ``config.toml``, environment and CLI."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from constraints.trace import TRACE_LEVELS
from network.loader import PROFILE_NAMES
from project_config import get_section


@dataclass(frozen=True)
class RunSettings:
    """Finalised settings of a steady-state run after precedence resolution."""

    output_dir: str
    suffix: str
    delimiter: str
    trace_level: str
    profile: str
    events_enabled: bool
    events_dir: str
    events_max_bytes: int


_DEFAULTS = RunSettings(
    output_dir="",
    suffix="_stable.csv",
    delimiter=",",
    trace_level="none",
    profile="dev",
    events_enabled=False,
    events_dir="logs/steady",
    events_max_bytes=100 * 1024 * 1024,
)

_ENV_KEYS = {
    "output_dir": "REGNET_OUTPUT_DIR",
    "trace_level": "REGNET_TRACE_LEVEL",
    "profile": "REGNET_VALIDATION_PROFILE",
    "events_enabled": "REGNET_EVENTS_ENABLED",
    "events_dir": "REGNET_EVENTS_DIR",
}


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def _parse_int(value: Any) -> Optional[int]:
    try:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip():
            return int(value)
    except (TypeError, ValueError):
        return None
    return None


def _apply_overrides(settings: RunSettings, overrides: Mapping[str, Any]) -> RunSettings:
    values: Dict[str, Any] = asdict(settings)

    for key in ("output_dir", "events_dir"):
        value = overrides.get(key)
        if isinstance(value, str):
            values[key] = value
    suffix = overrides.get("suffix")
    if isinstance(suffix, str) and suffix and "/" not in suffix:
        values["suffix"] = suffix
    # csv only accepts a single-character delimiter.
    delimiter = overrides.get("delimiter")
    if isinstance(delimiter, str) and len(delimiter) == 1 and delimiter not in {'"', "\r", "\n"}:
        values["delimiter"] = delimiter
    trace_level = overrides.get("trace_level")
    if isinstance(trace_level, str) and trace_level.lower() in TRACE_LEVELS:
        values["trace_level"] = trace_level.lower()
    profile = overrides.get("profile")
    if isinstance(profile, str) and profile.lower() in PROFILE_NAMES:
        values["profile"] = profile.lower()
    if "events_enabled" in overrides:
        maybe = _parse_bool(overrides["events_enabled"])
        if maybe is not None:
            values["events_enabled"] = maybe
    if "events_max_bytes" in overrides:
        maybe_bytes = _parse_int(overrides["events_max_bytes"])
        if maybe_bytes is not None and maybe_bytes > 0:
            values["events_max_bytes"] = maybe_bytes

    return RunSettings(**values)


def _config_overrides() -> Dict[str, Any]:
    output = get_section("output", default={})
    search = get_section("search", default={})
    validation = get_section("validation", default={})
    events = get_section("events", default={})
    payload: Dict[str, Any] = {}
    if isinstance(output, dict):
        for key, field in (("directory", "output_dir"), ("suffix", "suffix"), ("delimiter", "delimiter")):
            if key in output:
                payload[field] = output[key]
    if isinstance(search, dict) and "trace_level" in search:
        payload["trace_level"] = search["trace_level"]
    if isinstance(validation, dict) and "profile" in validation:
        payload["profile"] = validation["profile"]
    if isinstance(events, dict):
        for key, field in (("enabled", "events_enabled"), ("directory", "events_dir"), ("max_bytes", "events_max_bytes")):
            if key in events:
                payload[field] = events[key]
    return payload


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    return {field: env[alias] for field, alias in _ENV_KEYS.items() if alias in env}


def resolve_settings(
    cli: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> RunSettings:
    """Resolve run settings: defaults < config.toml < environment < CLI.

    ``cli`` holds only the options the user actually passed; ``None`` values
    are ignored so that unset flags do not mask lower layers.
    """

    env_map = dict(os.environ) if env is None else dict(env)
    settings = _apply_overrides(_DEFAULTS, _config_overrides())
    settings = _apply_overrides(settings, _env_overrides(env_map))
    cli_overrides = {key: value for key, value in (cli or {}).items() if value is not None}
    return _apply_overrides(settings, cli_overrides)


__all__ = ["RunSettings", "resolve_settings"]
