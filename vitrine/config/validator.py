"""Configuration validation."""

import logging
from typing import Dict, Any, List

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


VALID_MERGE_MODES = ['merged', 'unmerged']
VALID_LOAD_FILTERS = ['all', 'parents']
VALID_PUBLISH_FILTERS = ['all', 'videos', 'logos', 'icons', 'mame_artwork', 'videos_and_logos']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    errors.extend(_validate_app(config.get('app', {})))
    errors.extend(_validate_paths(config.get('paths', {})))
    errors.extend(_validate_mame(config.get('mame', {})))
    errors.extend(_validate_dosbox(config.get('dosbox', {})))
    errors.extend(_validate_filters(config.get('filters', {})))
    errors.extend(_validate_logging(config.get('logging', {})))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_app(section: Dict[str, Any]) -> List[str]:
    """Validate app section."""
    errors = []

    for key in ('name', 'database', 'language', 'default_section'):
        value = section.get(key)
        if not value or not isinstance(value, str):
            errors.append(f"app.{key} must be a non-empty string")

    language = section.get('language')
    if isinstance(language, str) and len(language) != 2:
        errors.append("app.language must be a 2-letter code")

    if not isinstance(section.get('full_screen', False), bool):
        errors.append("app.full_screen must be a boolean")

    return errors


def _validate_paths(section: Dict[str, Any]) -> List[str]:
    """Validate paths section."""
    errors = []

    for path_key in ('source', 'output'):
        if not section.get(path_key):
            errors.append(f"paths.{path_key} is required")

    return errors


def _validate_mame(section: Dict[str, Any]) -> List[str]:
    """Validate MAME section (romset types, preferred version, external location)."""
    errors = []

    romset_types = section.get('romset_types') or {}
    if not isinstance(romset_types, dict):
        errors.append("mame.romset_types must be a mapping of version to merge mode")
    else:
        for version, mode in romset_types.items():
            if mode not in VALID_MERGE_MODES:
                errors.append(
                    f"mame.romset_types.{version} must be one of: {', '.join(VALID_MERGE_MODES)}"
                )

    preferred = section.get('preferred_version')
    if preferred is not None and not isinstance(preferred, str):
        errors.append("mame.preferred_version must be a string (quote numeric versions)")

    location = section.get('external_emulator_location')
    if location is not None:
        if not isinstance(location, str) or not location.startswith(('http://', 'https://')):
            errors.append("mame.external_emulator_location must be an http(s) URL")

    return errors


def _validate_dosbox(section: Dict[str, Any]) -> List[str]:
    """Validate DOSBox section."""
    errors = []

    if not section.get('type') or not isinstance(section.get('type'), str):
        errors.append("dosbox.type must be a non-empty string")

    return errors


def _validate_filters(section: Dict[str, Any]) -> List[str]:
    """Validate filter selection."""
    errors = []

    load = section.get('load', 'all')
    if load not in VALID_LOAD_FILTERS:
        errors.append(f"filters.load must be one of: {', '.join(VALID_LOAD_FILTERS)}")

    publish = section.get('publish', 'all')
    if publish not in VALID_PUBLISH_FILTERS:
        errors.append(f"filters.publish must be one of: {', '.join(VALID_PUBLISH_FILTERS)}")

    return errors


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = []

    level = section.get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(f"logging.level must be one of: {', '.join(VALID_LOG_LEVELS)}")

    if not isinstance(section.get('console', True), bool):
        errors.append("logging.console must be a boolean")

    return errors
