"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for specslice:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.specslice/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~specslice.models.GlobalConfig`
  JSON file storing defaults (encoding, DTO language, tag order).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specslice.exceptions import ConfigError
from specslice.models import GlobalConfig

_APP_NAME = "specslice"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specslice.json"

ENV_FORMAT = "SPECSLICE_FORMAT"
ENV_LANGUAGE = "SPECSLICE_LANGUAGE"
ENV_TAG_SORT = "SPECSLICE_TAG_SORT"


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

    On Linux/BSD: ``$XDG_CONFIG_HOME/specslice/`` (default ``~/.config/specslice/``).
    On macOS/Windows: ``~/.specslice/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/specslice/`` (default ``~/.local/share/specslice/``).
    On macOS/Windows: ``~/.specslice/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~specslice.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    Keys address nested sections, e.g. ``encoding.format`` or
    ``dto.language``. The result is re-validated, so enum values are checked.

    Raises:
        ConfigError: If the key is unknown or the value is invalid.
    """
    data = config.model_dump(mode="json")
    section_name, _, field_name = key.partition(".")
    section = data.get(section_name)
    if not field_name or not isinstance(section, dict) or field_name not in section:
        raise ConfigError(
            f"Unknown config key: {key!r}. Valid keys: {', '.join(config_keys())}"
        )
    section[field_name] = value
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from exc


def config_keys() -> list[str]:
    """Return every settable dotted key of :class:`~specslice.models.GlobalConfig`."""
    data = GlobalConfig().model_dump(mode="json")
    return [f"{section}.{field}" for section, fields in data.items() for field in fields]


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specslice.json``.

    The file uses the same sections as the global config and only needs to
    carry the keys it overrides, e.g. ``{"dto": {"language": "kotlin"}}``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_language: Optional[str] = None,
    cli_sort: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_language``, ``cli_sort``)
        2. Environment variables (``SPECSLICE_FORMAT``,
           ``SPECSLICE_LANGUAGE``, ``SPECSLICE_TAG_SORT``)
        3. Project config (``./specslice.json``)
        4. User config (``~/.config/specslice/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer supplies an invalid value.
    """
    # 5 + 4. Load base global config (fills in defaults automatically)
    data = load_global_config().model_dump(mode="json")

    # 3. Layer in project-local config
    project = load_project_config()
    if project is not None:
        for section, values in project.items():
            if isinstance(values, dict) and isinstance(data.get(section), dict):
                data[section].update(values)

    overrides = (
        ("encoding", "format", os.environ.get(ENV_FORMAT), cli_format),
        ("dto", "language", os.environ.get(ENV_LANGUAGE), cli_language),
        ("tags", "sort", os.environ.get(ENV_TAG_SORT), cli_sort),
    )
    for section, field, env_value, cli_value in overrides:
        # 2. Environment variable
        if env_value:
            data[section][field] = env_value.lower()
        # 1. CLI flag (highest precedence)
        if cli_value is not None:
            data[section][field] = cli_value

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
