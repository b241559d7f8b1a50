"""Configuration loading and parsing."""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


DEFAULT_CONFIG: Dict[str, Any] = {
    'app': {
        'name': 'Vitrine',
        'author': '',
        'database': 'all',
        'language': 'en',
        'default_section': 'emulator',
        'full_screen': False,
    },
    'paths': {
        'source': '.',
        'output': 'public',
    },
    'mame': {
        'external_emulator_location': None,
        'preferred_version': None,
        'romset_types': {},
    },
    'dosbox': {
        'type': 'dosbox',
    },
    'filters': {
        'load': 'all',
        'publish': 'all',
    },
    'logging': {
        'level': 'INFO',
        'console': True,
        'file': None,
    },
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and parse configuration file.

    Values missing from the file are filled in from DEFAULT_CONFIG.

    Args:
        config_path: Path to vitrine.yaml file. If None, searches current directory.

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigError: If config file cannot be loaded or parsed
    """
    # Determine config file path
    if config_path is None:
        config_path = Path.cwd() / "vitrine.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}\n"
            f"Copy vitrine.yaml.example to vitrine.yaml and configure it."
        )

    # Load YAML
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}")

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise ConfigError("Configuration file must contain a YAML dictionary")

    return merge_defaults(config)


def merge_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill in missing sections and keys from DEFAULT_CONFIG.

    Args:
        config: Configuration dictionary as read from disk

    Returns:
        New dictionary with defaults applied (input is not modified)
    """
    merged = copy.deepcopy(DEFAULT_CONFIG)

    for section, values in config.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values

    return merged


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., 'mame.preferred_version')
        default: Default value if path not found

    Returns:
        Configuration value or default

    Example:
        >>> get_config_value(config, 'mame.romset_types')
        {'0.281': 'merged'}
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value
