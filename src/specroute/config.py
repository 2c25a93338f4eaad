"""Configuration loading with XDG paths and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specroute/`` on macOS and Windows.  See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- ``<config dir>/config.json``, deserialised into a
  :class:`~specroute.models.GlobalConfig`.
* **Project config** -- ``./specroute.json``, same shape, overriding the
  user config key by key.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and user config into the
  effective configuration.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from specroute.exceptions import ConfigError
from specroute.models import GlobalConfig

_APP_NAME = "specroute"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specroute.json"

# Environment variable -> DriverConfig field.
_DRIVER_ENV_VARS = {
    "SPECROUTE_COERCE_FORM_PARAMS": "coerce_form_params",
    "SPECROUTE_PATH_PARAMS": "path_params",
    "SPECROUTE_QUERY_PARAMS": "query_params",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/specroute/`` (default ``~/.config/specroute/``).
    On macOS/Windows: ``~/.specroute/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specroute/`` (default ``~/.local/share/specroute/``).
    On macOS/Windows: ``~/.specroute/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def _read_json(path: Path, label: str) -> Optional[dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_global_config() -> Optional[dict[str, Any]]:
    """Load the user config from the config directory, or ``None`` if absent.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json(get_config_dir() / _CONFIG_FILENAME, "global config")


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specroute.json``.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json(Path.cwd() / _PROJECT_CONFIG_FILENAME, "project config")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into a copy of *base*."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got '{value}'")


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    prefix = os.environ.get("SPECROUTE_PREFIX")
    if prefix:
        overrides["prefix"] = prefix

    driver_overrides = {
        field: _parse_bool(var, os.environ[var])
        for var, field in _DRIVER_ENV_VARS.items()
        if os.environ.get(var)
    }
    if driver_overrides:
        overrides["driver_config"] = driver_overrides
    return overrides


# --- Precedence resolution ---


def resolve_config(
    cli_prefix: Optional[str] = None,
    cli_driver: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_prefix``, ``cli_driver``)
        2. Environment variables (``SPECROUTE_PREFIX``,
           ``SPECROUTE_COERCE_FORM_PARAMS``, ``SPECROUTE_PATH_PARAMS``,
           ``SPECROUTE_QUERY_PARAMS``)
        3. Project config (``./specroute.json``)
        4. User config (``~/.config/specroute/config.json``)
        5. Defaults

    Raises:
        ConfigError: If a config file or environment value is invalid.
    """
    data: dict[str, Any] = {}
    for layer in (load_global_config(), load_project_config(), _env_overrides()):
        if layer:
            data = _merge(data, layer)

    if cli_prefix is not None:
        data["prefix"] = cli_prefix
    if cli_driver is not None:
        data["driver"] = cli_driver

    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
