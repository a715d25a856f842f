"""Where bash-completion-f keeps its files, and how it writes them.

Three locations matter:

* the **config directory** holding ``config.json``
  (:class:`~bashcompf.models.GlobalConfig`). On Linux and the BSDs this is
  ``$XDG_CONFIG_HOME/bash-completion-f``. Elsewhere it is
  ``~/.bash-completion-f.d``.
* the **data directory** for crash logs (``$XDG_DATA_HOME/bash-completion-f``
  or ``~/.bash-completion-f.d/logs``).
* the **entries file** itself, chosen by :func:`resolve_entries_file` and
  passed explicitly to every function in :mod:`bashcompf.entries`.

Files are replaced with :func:`atomic_write`, so readers see either the old or
the new content. Nothing is locked: when two processes update the entries
file at the same time, the last rename wins.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from bashcompf.exceptions import ConfigError
from bashcompf.models import GlobalConfig

_APP_NAME = "bash-completion-f"
_CONFIG_FILENAME = "config.json"
_ENTRIES_ENV_VAR = "BASH_COMPLETION_F_FILE"
_NEW_FILE_MODE = 0o644

SYSTEM_ENTRIES_FILE = Path("/etc/bash-completion-f")
"""Entries file used when running as root."""


# --- directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}.d"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """``$env_var`` if set and non-empty, else ``~/<default_segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def _app_dir(env_var: str, default_segments: tuple[str, ...], fallback_sub: str = "") -> Path:
    if _is_xdg_platform():
        path = _xdg_base(env_var, default_segments) / _APP_NAME
    else:
        path = _fallback_base_dir()
        if fallback_sub:
            path = path / fallback_sub
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return the config directory, creating it if needed."""
    return _app_dir("XDG_CONFIG_HOME", (".config",))


def get_data_dir() -> Path:
    """Return the directory for crash logs, creating it if needed."""
    return _app_dir("XDG_DATA_HOME", (".local", "share"), fallback_sub="logs")


# --- writing ---


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in one rename.

    The text goes to a temporary file next to *path*, which is flushed,
    synced and then renamed over the target. Line endings are written as
    given. An existing file keeps its permission bits, and a new one gets
    ``0644``. If anything fails the temporary file is removed and the error
    propagates with *path* untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = path.stat().st_mode & 0o7777 if path.exists() else _NEW_FILE_MODE

    tmp = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
        newline="",
    )
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp.name, mode)
        os.replace(tmp.name, path)
    except BaseException:
        try:
            os.unlink(tmp.name)
        except OSError:
            pass
        raise


# --- global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~bashcompf.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Entries file resolution ---


def is_privileged() -> bool:
    """Return True when running with an effective uid of 0."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def default_entries_file(privileged: Optional[bool] = None) -> Path:
    """Return the default entries file location.

    ``/etc/bash-completion-f`` when running as root, otherwise
    ``~/.bash-completion-f``.

    Args:
        privileged: Override the privilege check (mostly for tests).
    """
    if privileged is None:
        privileged = is_privileged()
    if privileged:
        return SYSTEM_ENTRIES_FILE
    return Path.home() / f".{_APP_NAME}"


def resolve_entries_file(
    cli_file: Optional[str] = None,
    config: Optional[GlobalConfig] = None,
) -> Path:
    """Resolve the entries file with full precedence chain.

    Precedence (high to low):
        1. CLI flag (``--file``)
        2. Environment variable (``BASH_COMPLETION_F_FILE``)
        3. User config (``file`` key)
        4. Default (see :func:`default_entries_file`)

    Args:
        cli_file: Path given on the command line, if any.
        config: Already-loaded global config. Loaded from disk when omitted.

    Returns:
        The entries file path, with ``~`` expanded.
    """
    if cli_file:
        return Path(cli_file).expanduser()

    env_file = os.environ.get(_ENTRIES_ENV_VAR)
    if env_file:
        return Path(env_file).expanduser()

    if config is None:
        config = load_global_config()
    if config.file:
        return Path(config.file).expanduser()

    return default_entries_file()
