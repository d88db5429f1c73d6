"""
Configuration Loader

Reads and writes the YAML settings file kept in the project's config/
directory (or a path given explicitly).
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

SETTINGS_FILENAME = "settings.yaml"


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Fall back to the current working directory
    return Path.cwd() / 'config'


def default_settings_path() -> Path:
    """Location of the settings file when none is given."""
    return _get_config_dir() / SETTINGS_FILENAME


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: File to read (defaults to config/settings.yaml)

    Returns:
        Parsed YAML content as dictionary; empty when the file is missing
        or empty
    """
    config_path = Path(path) if path else default_settings_path()

    if not config_path.exists():
        return {}

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def save_config(data: Dict[str, Any], path: Optional[Union[str, Path]] = None) -> Path:
    """
    Write configuration back to YAML, creating the directory if needed.

    Returns:
        Path that was written
    """
    config_path = Path(path) if path else default_settings_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)

    return config_path
