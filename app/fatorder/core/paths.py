"""Filesystem locations used by fatorder.

Settings, run history and the default staging root follow the XDG Base
Directory layout:

- Config: ~/.config/fatorder/config.toml
- State: ~/.local/state/fatorder/history.jsonl
- Cache: ~/.cache/fatorder/ (default staging root)

A run stages its mirror in a fixed sub-directory of the staging root;
the recovery marker is written next to that sub-directory.
"""

import os
from pathlib import Path

APP_NAME = "fatorder"

STAGING_DIRNAME = "fatorder-staging"

RECOVERY_MARKER = ".fatorder-recovery"


def _xdg_app_dir(env_var: str, fallback: str) -> Path:
    """``$env_var/fatorder``, or ``~/fallback/fatorder`` when unset or empty."""
    base = os.environ.get(env_var)
    root = Path(base) if base else Path.home() / fallback
    return root / APP_NAME


def get_config_dir() -> Path:
    return _xdg_app_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    return _xdg_app_dir("XDG_STATE_HOME", ".local/state")


def get_cache_dir() -> Path:
    return _xdg_app_dir("XDG_CACHE_HOME", ".cache")


def get_settings_path() -> Path:
    return get_config_dir() / "config.toml"


def get_history_path() -> Path:
    return get_state_dir() / "history.jsonl"


def get_default_staging_root() -> Path:
    """Staging root used when the settings do not name one."""
    return get_cache_dir()


def staging_dir_for(staging_root: Path) -> Path:
    """Directory a run mirrors the target into."""
    return staging_root / STAGING_DIRNAME


def recovery_marker_for(staging_dir: Path) -> Path:
    """Recovery marker path for a staging directory.

    The marker is a sibling of the staging directory so the recovery copy
    stays an exact mirror of the target.
    """
    return staging_dir.parent / RECOVERY_MARKER


def _ensure_dir(path: Path, name: str) -> Path:
    """Create ``path`` (and parents) if missing.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the config directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_state_dir() -> Path:
    """Create the state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")
