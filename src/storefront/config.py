"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for storefront:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.storefront/`` on macOS and Windows. See :func:`get_config_dir`.
* **User config** -- A single :class:`~storefront.models.ClientConfig`
  JSON file storing the API base override and request settings.
* **Precedence resolution** -- :func:`resolve_config` merges the CLI flag,
  the environment variable, project-local config, and user config into the
  effective :class:`~storefront.models.ClientConfig`.
* **Endpoint resolution** -- :func:`resolve_api_base` turns the optional
  base URL override into the prefix every API path is rooted under.

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

from storefront.exceptions import ConfigError
from storefront.models import ClientConfig

_APP_NAME = "storefront"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "storefront.json"

API_SUFFIX = "/api"
ENV_API_BASE = "STOREFRONT_API_BASE"


# --- Endpoint resolution ---


def resolve_api_base(configured: Optional[str]) -> str:
    """Return the prefix under which all API operations are rooted.

    Args:
        configured: External base URL, e.g. ``"https://shop.example.com"``.

    Returns:
        ``"<configured>/api"`` when *configured* is non-empty, otherwise the
        same-origin relative path ``"/api"``.
    """
    if configured:
        return f"{configured.rstrip('/')}{API_SUFFIX}"
    return API_SUFFIX


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/storefront/`` (default ``~/.config/storefront/``).
    On macOS/Windows: ``~/.storefront/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.
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


# --- User config ---


def _config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_config() -> ClientConfig:
    """Load the user configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~storefront.models.ClientConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _config_path()
    if not path.is_file():
        return ClientConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ClientConfig) -> Path:
    """Persist the user configuration atomically and return its path."""
    path = _config_path()
    data = config.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./storefront.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object, or its
            ``api_base`` is neither a string nor null.
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
    api_base = data.get("api_base")
    if api_base is not None and not isinstance(api_base, str):
        raise ConfigError(
            f"Invalid project config at {path}: api_base must be a string, "
            f"got {type(api_base).__name__}"
        )
    return data


# --- Precedence resolution ---


def resolve_config(cli_base_url: Optional[str] = None) -> ClientConfig:
    """Resolve the effective client configuration.

    Precedence for ``api_base`` (high to low):
        1. CLI flag (``cli_base_url``)
        2. Environment variable (``STOREFRONT_API_BASE``)
        3. Project config (``./storefront.json``)
        4. User config (``~/.config/storefront/config.json``)
        5. Default (``None``: same-origin ``/api``)

    Returns:
        The merged :class:`~storefront.models.ClientConfig`.
    """
    config = load_config()

    project = load_project_config()
    if project is not None and project.get("api_base"):
        config.api_base = project["api_base"]

    env_base = os.environ.get(ENV_API_BASE)
    if env_base:
        config.api_base = env_base

    if cli_base_url is not None:
        config.api_base = cli_base_url or None

    return config
