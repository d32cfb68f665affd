"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for snippetgen:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.snippetgen/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~snippetgen.models.GlobalConfig`
  JSON file storing defaults (language, service root, schema source).
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

from snippetgen.exceptions import ConfigError
from snippetgen.models import GlobalConfig

_APP_NAME = "snippetgen"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "snippetgen.json"

ENV_LANGUAGE = "SNIPPETGEN_LANGUAGE"
ENV_SCHEMA = "SNIPPETGEN_SCHEMA"
ENV_SERVICE_ROOT = "SNIPPETGEN_SERVICE_ROOT"


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

    On Linux/BSD: ``$XDG_CONFIG_HOME/snippetgen/`` (default ``~/.config/snippetgen/``).
    On macOS/Windows: ``~/.snippetgen/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/snippetgen/`` (default ``~/.local/share/snippetgen/``).
    On macOS/Windows: ``~/.snippetgen/logs/``.
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
        fd = None
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


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~snippetgen.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
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
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./snippetgen.json``.

    A repository typically pins ``schema_source`` and ``service_root`` here so
    that every contributor resolves against the same schema.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

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
    cli_language: Optional[str] = None,
    cli_schema: Optional[str] = None,
    cli_service_root: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_language``, ``cli_schema``, ``cli_service_root``,
           ``cli_format``)
        2. Environment variables (``SNIPPETGEN_LANGUAGE``,
           ``SNIPPETGEN_SCHEMA``, ``SNIPPETGEN_SERVICE_ROOT``)
        3. Project config (``./snippetgen.json``)
        4. User config (``~/.config/snippetgen/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~snippetgen.models.GlobalConfig`.

    Raises:
        ConfigError: If a config file is invalid.
    """
    # 5 + 4. Global config fills in defaults automatically
    global_cfg = load_global_config()

    # 3. Project-local overrides, validated as a whole
    project = load_project_config()
    if project:
        merged = global_cfg.model_dump()
        merged.update(project)
        try:
            global_cfg = GlobalConfig.model_validate(merged)
        except ValueError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2 + 1. Environment, then CLI flags
    overrides = (
        ("default_language", ENV_LANGUAGE, cli_language),
        ("schema_source", ENV_SCHEMA, cli_schema),
        ("service_root", ENV_SERVICE_ROOT, cli_service_root),
    )
    for field, env_var, cli_value in overrides:
        env_value = os.environ.get(env_var)
        if env_value:
            setattr(global_cfg, field, env_value)
        if cli_value is not None:
            setattr(global_cfg, field, cli_value)

    if cli_format is not None:
        global_cfg.output.format = cli_format

    return global_cfg
