# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the config unit so this responsibility stays isolated, testable, and easy to evolve.

"""
Configuration loading utilities for the HCK bookmarklet API.

Conventions:
- Machine-specific config: resources/config/machine.json (optional)
- Environment variables override JSON values.
- JSON values can reference environment variables using ${VAR_NAME} placeholders.

The upstream credential is never required at import time; a missing key only
shows up as an upstream authentication error.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
RESOURCES_DIR = BASE_DIR / "resources"
DATA_DIR = BASE_DIR / "data"
LOGS_DIR = DATA_DIR / "logs"

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT_S = 60
DEFAULT_APP_URL = "https://your-domain.com"
DEFAULT_APP_TITLE = "HCK Bookmarklet"

DEFAULTS: Dict[str, Any] = {
    "openrouter": {
        "base_url": DEFAULT_BASE_URL,
        "timeout_s": DEFAULT_TIMEOUT_S,
    },
    "app": {
        "url": DEFAULT_APP_URL,
        "title": DEFAULT_APP_TITLE,
    },
}


def get_config_dir() -> Path:
    """Return the config directory, honouring HCK_CONFIG_DIR."""
    override = os.getenv("HCK_CONFIG_DIR")
    if override:
        return Path(override)
    return RESOURCES_DIR / "config"


_ENV_PATTERN = re.compile(r"\$\{([A-Z0-9_]+)\}")


def _interpolate_env(value: Any) -> Any:
    """Interpolate ${VAR} placeholders within strings using environment variables.

    Non-string types are returned unchanged.
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            var = match.group(1)
            return os.getenv(var, match.group(0))  # leave placeholder if unset

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(v) for v in value]
    return value


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Deeply merge mapping 'override' into dict 'base'. Returns new dict."""
    result: Dict[str, Any] = dict(base)
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(result.get(k), Mapping):
            result[k] = _deep_merge(dict(result[k]), v)  # type: ignore[index]
        else:
            result[k] = v
    return result


def load_json_file(path: os.PathLike[str] | str | None) -> Dict[str, Any]:
    """Load JSON from path if it exists; return empty dict if missing.

    Raises ValueError for malformed JSON.
    """
    if path is None:
        return {}
    p = Path(path)
    if not p.exists():
        return {}
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON at {p}: {e}") from e


def _env_overrides() -> Dict[str, Any]:
    """Collect supported environment variables into a nested dict structure.

    Supported variables:
    - OPENROUTER_API -> openrouter.api_key
    - OPENROUTER_BASE_URL -> openrouter.base_url
    - OPENROUTER_TIMEOUT_S -> openrouter.timeout_s (int if parseable)
    - HCK_APP_URL -> app.url
    - HCK_APP_TITLE -> app.title
    """
    result: Dict[str, Any] = {}

    openrouter: Dict[str, Any] = {}
    api_key = os.getenv("OPENROUTER_API")
    base_url = os.getenv("OPENROUTER_BASE_URL")
    timeout_s = os.getenv("OPENROUTER_TIMEOUT_S")
    if api_key is not None:
        openrouter["api_key"] = api_key
    if base_url is not None:
        openrouter["base_url"] = base_url
    if timeout_s is not None:
        try:
            openrouter["timeout_s"] = int(timeout_s)
        except ValueError:
            openrouter["timeout_s"] = timeout_s
    if openrouter:
        result["openrouter"] = openrouter

    app: Dict[str, Any] = {}
    app_url = os.getenv("HCK_APP_URL")
    app_title = os.getenv("HCK_APP_TITLE")
    if app_url is not None:
        app["url"] = app_url
    if app_title is not None:
        app["title"] = app_title
    if app:
        result["app"] = app
    return result


def load_machine_config(
    path: os.PathLike[str] | str | None = None,
    defaults: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Load machine configuration applying precedence and interpolation.

    Precedence: env overrides > JSON file > defaults
    """
    if path is None:
        path = get_config_dir() / "machine.json"
    defaults = dict(DEFAULTS if defaults is None else defaults)
    json_config = load_json_file(path)
    json_config = _interpolate_env(json_config)
    merged = _deep_merge(defaults, json_config)
    merged = _deep_merge(merged, _env_overrides())
    return merged


@dataclass(frozen=True)
class UpstreamSettings:
    base_url: str
    api_key: str | None
    timeout_s: int
    app_url: str
    app_title: str


def resolve_openrouter_settings(
    machine: Optional[Mapping[str, Any]] = None,
) -> UpstreamSettings:
    """Resolve upstream connection settings from machine config."""
    if machine is None:
        machine = load_machine_config()
    openrouter = machine.get("openrouter")
    app = machine.get("app")
    if not isinstance(openrouter, Mapping):
        openrouter = {}
    if not isinstance(app, Mapping):
        app = {}

    timeout_s = openrouter.get("timeout_s", DEFAULT_TIMEOUT_S)
    try:
        timeout_s = int(timeout_s)
    except (TypeError, ValueError):
        timeout_s = DEFAULT_TIMEOUT_S

    return UpstreamSettings(
        base_url=str(openrouter.get("base_url") or DEFAULT_BASE_URL),
        api_key=openrouter.get("api_key") or None,
        timeout_s=timeout_s,
        app_url=str(app.get("url") or DEFAULT_APP_URL),
        app_title=str(app.get("title") or DEFAULT_APP_TITLE),
    )
