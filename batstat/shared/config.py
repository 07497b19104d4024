"""Configuration loading utilities."""

import os
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv


def get_config_path(config_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Resolve the configuration file to use.

    Args:
        config_path: Explicit path to a config file. If None, falls back to
            the BATSTAT_CONFIG environment variable.

    Returns:
        Path to the configuration file, or None if none was requested.
    """
    if config_path is None:
        config_path = os.getenv("BATSTAT_CONFIG")
    if not config_path:
        return None
    return Path(config_path)


def load_yaml_config(
    config_path: Optional[Union[str, Path]] = None,
    load_env: bool = True,
) -> dict:
    """Load YAML configuration file.

    Args:
        config_path: Path to config file. If None, uses get_config_path().
        load_env: Whether to load .env file first.

    Returns:
        Configuration dictionary; empty when no config file was requested.

    Raises:
        FileNotFoundError: If the requested config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
    """
    if load_env:
        load_dotenv()

    path = get_config_path(config_path)
    if path is None:
        return {}

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def get_log_level(config: dict) -> str:
    """Extract log level from config, with sensible default.

    Args:
        config: Configuration dictionary.

    Returns:
        Log level string (e.g., 'INFO', 'DEBUG').
    """
    return (config.get("log_level") or "INFO").upper()
