"""Per-platform path management for savectl.

This module provides the standardized locations of the settings file,
the default backup root and the log file.

Platform defaults for the application data base directory:
- Windows: %APPDATA% (or ~/AppData/Roaming)
- macOS: ~/Library/Application Support
- Linux: $XDG_CONFIG_HOME (or ~/.config)

The SAVECTL_CONFIG_HOME environment variable replaces the base directory
on every platform.
"""

import os
import sys
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "savectl"

# Directory created next to the config dir when no backup root is configured
DEFAULT_BACKUP_DIRNAME = "GSM Backups"

SETTINGS_FILENAME = "settings.json"
LOG_FILENAME = "savectl.log"

CONFIG_HOME_ENV = "SAVECTL_CONFIG_HOME"


def get_app_data_base(platform: str | None = None) -> Path:
    """Get the per-user application data base directory.

    Args:
        platform: Platform identifier (defaults to sys.platform).

    Returns:
        Base directory under which savectl keeps its files.
    """
    override = os.environ.get(CONFIG_HOME_ENV)
    if override:
        return Path(override)

    platform = platform or sys.platform
    home = Path.home()

    if platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if platform == "darwin":
        return home / "Library" / "Application Support"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else home / ".config"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to <app data base>/savectl/.
    """
    return get_app_data_base() / APP_NAME


def get_settings_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to <config dir>/settings.json.
    """
    return get_config_dir() / SETTINGS_FILENAME


def get_default_backup_dir() -> Path:
    """Get the backup root used when none is configured.

    Returns:
        Path to <app data base>/GSM Backups/.
    """
    return get_app_data_base() / DEFAULT_BACKUP_DIRNAME


def get_log_path() -> Path:
    """Get the log file path.

    Returns:
        Path to <config dir>/savectl.log.
    """
    return get_config_dir() / LOG_FILENAME


def get_user_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to <config dir>/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
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
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")

