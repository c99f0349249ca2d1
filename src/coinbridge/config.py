from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .settings import Settings

ENV_PREFIX = "COINBRIDGE_"
_RESERVED_ENV_KEYS = {"CONFIG", "LOG_LEVEL"}


def _deep_set(obj: dict[str, Any], path: list[str], value: Any) -> None:
    cur: dict[str, Any] = obj
    for key in path[:-1]:
        nxt = cur.get(key)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[key] = nxt
        cur = nxt
    cur[path[-1]] = value


def _parse_env_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def apply_env_overrides(
    data: dict[str, Any],
    environ: Mapping[str, str] | None = None,
    *,
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:
    """Merge ``COINBRIDGE_A__B=value`` variables into nested config keys.

    ``COINBRIDGE_EXCHANGES__LIVECOIN__CREDENTIALS__API_KEY`` sets
    ``exchanges.livecoin.credentials.api_key``. Values are parsed as YAML
    scalars so ``false`` and ``30`` keep their types.
    """
    environ = os.environ if environ is None else environ
    merged: dict[str, Any] = dict(data)

    for key, raw_value in sorted(environ.items()):
        if not key.startswith(prefix):
            continue

        remainder = key[len(prefix):]
        if remainder in _RESERVED_ENV_KEYS:
            continue

        path = [p.lower() for p in remainder.split("__") if p]
        if path:
            _deep_set(merged, path, _parse_env_value(raw_value))

    return merged


def read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    return loaded


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from YAML plus environment overrides.

    The file defaults to ``$COINBRIDGE_CONFIG`` or ``./config.yml``; a missing
    file yields default settings.
    """
    environ = os.environ if environ is None else environ
    if config_path is None:
        config_path = environ.get(f"{ENV_PREFIX}CONFIG", "config.yml")

    data = read_config_file(Path(config_path).expanduser())
    data = apply_env_overrides(data, environ)

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
