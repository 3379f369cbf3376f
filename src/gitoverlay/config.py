"""Configuration file management for gitoverlay."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore

import tomli_w

logger = logging.getLogger(__name__)

# Default configuration file location
CONFIG_FILE = Path.home() / ".gitoverlay.toml"

# Default configuration
DEFAULT_CONFIG = {
    "status": {
        "enabled": True,
        "cache_timeout_ms": 2000,
        "debounce_delay_ms": 200,
        "show_directory_status": True,
        "git_executable": "git",
    },
    "symbols": {
        "added": "+",
        "modified": "~",
        "renamed": "→",
        "deleted": "✗",
        "untracked": "?",
        "conflict": "!",
        "staged": "●",
        "unstaged": "○",
        "partially_staged": "±",
    },
    "colors": {
        "GitAdded": "green",
        "GitRenamed": "magenta",
        "GitUntracked": "blue",
        "GitConflict": "red_bold",
        "GitStagedModified": "green",
        "GitUnstagedModified": "yellow",
        "GitPartiallyStaged": "orange",
        "GitStagedDeleted": "green",
        "GitUnstagedDeleted": "red",
    },
}

# Color name to ANSI SGR parameters
COLOR_MAP = {
    "black": "30",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "magenta": "35",
    "cyan": "36",
    "white": "37",
    "orange": "38;5;215",
    "gray_dim": "2;37",
    "red_bold": "1;31",
    "green_bold": "1;32",
    "yellow_bold": "1;33",
    "blue_bold": "1;34",
}


def load_config() -> Dict[str, Any]:
    """Load configuration from file or return defaults."""
    if not CONFIG_FILE.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(CONFIG_FILE, "rb") as f:
            config = tomllib.load(f)
    except (OSError, ValueError) as err:
        # If config is corrupted, return defaults
        logger.warning("Ignoring unreadable configuration %s: %s", CONFIG_FILE, err)
        return copy.deepcopy(DEFAULT_CONFIG)
    # Merge with defaults to ensure all keys exist
    return _merge_config(DEFAULT_CONFIG, config)


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file."""
    try:
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "wb") as f:
            tomli_w.dump(config, f)
    except OSError as err:
        # Don't break the app if config save fails, but inform the user
        logger.warning("Failed to save configuration to %s: %s", CONFIG_FILE, err)


def _merge_config(default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    """Merge user config with defaults, preserving user values."""
    result = copy.deepcopy(default)
    for key, value in user.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_config(result[key], value)
        else:
            result[key] = value
    return result


def get_status_settings() -> Dict[str, Any]:
    """Get the ``[status]`` table (timeouts, directory status, enabled flag)."""
    config = load_config()
    return config.get("status", DEFAULT_CONFIG["status"])


def get_symbols() -> Dict[str, str]:
    """Get the symbol drawn next to each kind of change."""
    config = load_config()
    return config.get("symbols", DEFAULT_CONFIG["symbols"])


def get_highlight_colors() -> Dict[str, str]:
    """Get the color name for each highlight group."""
    config = load_config()
    return config.get("colors", DEFAULT_CONFIG["colors"])


def set_status_option(key: str, value: Any) -> None:
    """Persist a single ``[status]`` option, e.g. ``enabled``."""
    config = load_config()
    if "status" not in config:
        config["status"] = {}
    config["status"][key] = value
    save_config(config)


def create_default_config() -> None:
    """Create default configuration file if it doesn't exist."""
    if CONFIG_FILE.exists():
        return

    save_config(DEFAULT_CONFIG)


__all__ = [
    "CONFIG_FILE",
    "COLOR_MAP",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    "get_status_settings",
    "get_symbols",
    "get_highlight_colors",
    "set_status_option",
    "create_default_config",
]
