"""
Utility functions for configuration loading.

This module provides common utilities used by service configs:
- config_dir: Location of secrets.env / config.yaml
- load_env_file: Parse .env style files (python-dotenv)
- load_yaml_file: Parse YAML config files
- load_json_setting: Parse JSON-valued settings such as SLACK_WEBHOOK_URLS
- safe_int: Parse integers with fallback
"""

import json
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values


def config_dir() -> Path:
    """Return the directory holding secrets.env and config.yaml.

    NOTIFIER_CONFIG_DIR overrides the default ~/.config/confluence-notifier.
    """
    override = os.environ.get("NOTIFIER_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "confluence-notifier"


def load_env_file(path: Path) -> dict[str, str]:
    """Load a .env style file into a dictionary.

    Keys without a value are dropped.

    Args:
        path: Path to the .env file

    Returns:
        Dictionary of key-value pairs (empty if the file does not exist)
    """
    if not path.exists():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file into a dictionary.

    Returns:
        Dictionary from YAML content, or empty dict if missing or unparsable
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return {}

    return data if isinstance(data, dict) else {}


def load_secrets() -> dict[str, str]:
    """Load secrets.env from the config directory."""
    return load_env_file(config_dir() / "secrets.env")


def load_settings_yaml() -> dict[str, Any]:
    """Load config.yaml from the config directory."""
    return load_yaml_file(config_dir() / "config.yaml")


def get_setting(key: str, secrets: dict[str, str], default: str = "") -> str:
    """Look up a setting: environment first, then secrets.env."""
    value = os.environ.get(key)
    if value:
        return value
    return secrets.get(key) or default


def load_json_setting(raw: str | None) -> Any:
    """Parse a JSON-valued setting.

    Returns:
        The decoded value, or None when the setting is empty or not valid JSON
    """
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None


def safe_int(value: str | None, default: int = 0) -> int:
    """Safely parse an integer from a string.

    Args:
        value: String to parse (can be None)
        default: Default value if parsing fails

    Returns:
        Parsed integer or default value
    """
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default
