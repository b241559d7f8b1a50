"""Localization resources (resources.json)."""

import json
import logging
from typing import Dict, Iterator, Tuple

from ..config.loader import ConfigError
from ..content.repository import ContentRepository

logger = logging.getLogger(__name__)

RESOURCES_KEY = 'resources.json'

RTL_LANGUAGES = ('ar',)


class LocalizationBundle:
    """Localized strings of one language."""

    def __init__(self, language: str, strings: Dict[str, str]):
        self.language = language
        self.strings = strings

    @classmethod
    def load(cls, repository: ContentRepository, language: str) -> 'LocalizationBundle':
        """
        Load the strings of a language from resources.json.

        The file maps language codes to key/string objects.

        Args:
            repository: Source content repository
            language: Language code (e.g. 'en')

        Returns:
            LocalizationBundle

        Raises:
            ConfigError: If the file is unreadable or lacks the language
        """
        try:
            resources = json.loads(repository.read_text(RESOURCES_KEY))
        except FileNotFoundError:
            raise ConfigError(f"Localization resources not found: {RESOURCES_KEY}")
        except ValueError as e:
            raise ConfigError(f"Invalid localization resources: {e}")

        logger.info(f"Loaded {len(resources)} languages")

        if language not in resources:
            raise ConfigError(
                f"Language '{language}' not found in {RESOURCES_KEY} "
                f"(available: {', '.join(sorted(resources))})"
            )

        return cls(language, dict(resources[language]))

    @property
    def direction(self) -> str:
        return 'rtl' if self.language in RTL_LANGUAGES else 'ltr'

    def get(self, key: str, default: str = '') -> str:
        return self.strings.get(key, default)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self.strings.items())
