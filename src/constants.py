"""Shared constants for kbd-informer preferences."""

import os
from pathlib import Path

APP_NAME = "kbd-informer"
VERSION = "0.2.0"

# Persisted preset key (mapping of symbol/icon-path keys to strings)
SAVED_SYMBOLS_KEY = "saved-symbols"

# Environment override for the settings file location
CONFIG_ENV_VAR = "KBD_INFORMER_CONFIG"

# File suffixes accepted for modifier icons (svg + common raster images)
ICON_SUFFIXES = (".svg", ".png", ".jpg", ".jpeg", ".webp")


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    return Path(value) if value else fallback


def config_dir() -> Path:
    """Directory holding the settings file (XDG_CONFIG_HOME aware)."""
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / APP_NAME


def state_dir() -> Path:
    """Directory holding the log file (XDG_STATE_HOME aware)."""
    return _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state") / APP_NAME


def default_config_path() -> Path:
    """Settings file path, honouring the KBD_INFORMER_CONFIG override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return config_dir() / "settings.json"
