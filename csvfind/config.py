"""Configuration management for csvfind."""

import json
import os
from pathlib import Path
from typing import Any

from .models.config import CsvfindConfig

# Application name for XDG paths
APP_NAME = "csvfind"

# Default configuration
DEFAULT_CONFIG: dict[str, Any] = {
    "search": {
        "backend": "auto",  # auto, ripgrep or python
        "ripgrep_path": "rg",
        "timeout_seconds": 60,
    },
    "render": {
        "delimiter": ",",
    },
    "fetch": {
        "timeout_seconds": 30.0,
        "retry_max_attempts": 3,
        "retry_base_seconds": 1.0,
        "retry_max_seconds": 10.0,
    },
    "paths": {
        # If not set, XDG defaults are used
        "data_dir": None,
    },
    "logging": {
        "level": "INFO",
        "file_enabled": True,
    },
}


def get_xdg_config_home() -> Path:
    """Get XDG config home directory."""
    return Path(os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")))


def get_xdg_data_home() -> Path:
    """Get XDG data home directory."""
    return Path(os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share")))


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_xdg_config_home() / APP_NAME / "config.json"


def load_config() -> dict[str, Any]:
    """Load configuration, merging with defaults."""
    config = deep_merge(DEFAULT_CONFIG, {})
    config_path = get_config_path()

    if config_path.exists():
        with open(config_path) as f:
            user_config = json.load(f)
            config = deep_merge(config, user_config)

    return config


def load_settings() -> CsvfindConfig:
    """Load configuration and validate it into the typed model."""
    return CsvfindConfig.model_validate(load_config())


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = {key: (deep_merge(value, {}) if isinstance(value, dict) else value) for key, value in base.items()}
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_data_dir() -> Path:
    """
    Get the data directory for csvfind.

    Priority:
    1. CSVFIND_DATA_DIR environment variable
    2. paths.data_dir in config.json
    3. XDG default: ~/.local/share/csvfind/
    """
    env_dir = os.environ.get("CSVFIND_DATA_DIR")
    if env_dir:
        return Path(env_dir)

    config = load_config()
    config_dir = config.get("paths", {}).get("data_dir")
    if config_dir:
        return Path(config_dir)

    return get_xdg_data_home() / APP_NAME


def get_source_path() -> Path:
    """Get the path the downloaded source CSV is stored at."""
    return get_data_dir() / "source" / "source.csv"


def get_processed_dir() -> Path:
    """Get the directory holding search results."""
    return get_data_dir() / "processed"


def get_backup_dir() -> Path:
    """Get the directory previous source files are moved to."""
    return get_data_dir() / "backup"


def get_logs_dir() -> Path:
    """Get the log file directory."""
    return get_data_dir() / "logs"
