"""
Ignomi Engine - Settings loading.

Settings live in $XDG_CONFIG_HOME/ignomi/settings.toml (default
~/.config/ignomi/settings.toml). Missing keys fall back to DEFAULTS;
an unreadable file falls back to DEFAULTS entirely.

Example settings.toml:
    [search]
    fuzzy_threshold = 70

    [clipboard]
    history_size = 100

    [quicklinks.nix]
    name = "NixOS Search"
    url = "https://search.nixos.org/packages?query={query}"
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

DEFAULTS: Dict[str, Any] = {
    "search": {
        "max_query_length": 256,
        "max_app_results": 30,
        "fuzzy_threshold": 60,
    },
    "clipboard": {
        "history_size": 50,
        "max_results": 10,
        "preview_chars": 60,
    },
    "apps": {
        "dirs": [],  # empty = standard XDG application directories
    },
    "commands": {
        "path": "",  # empty = <config dir>/commands.toml
    },
    "quicklinks": {},  # empty = built-in web searches (g, w, gh, yt)
}


def config_dir() -> Path:
    """Return the Ignomi configuration directory (not created)."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "ignomi"


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load engine settings from a TOML file.

    Args:
        path: Settings file. Defaults to <config dir>/settings.toml.

    Returns:
        Dictionary containing settings with defaults applied
    """
    defaults = copy.deepcopy(DEFAULTS)
    settings_path = Path(path) if path else config_dir() / "settings.toml"

    if not settings_path.exists():
        logger.debug(f"Settings file not found at {settings_path}, using defaults")
        return defaults

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {settings_path}: {e}")
        return defaults

    return _deep_merge(defaults, loaded)


def commands_path(settings: Dict[str, Any]) -> Path:
    """Resolve the commands.toml location from settings."""
    configured = settings.get("commands", {}).get("path") or ""
    if configured:
        return Path(configured).expanduser()
    return config_dir() / "commands.toml"


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
