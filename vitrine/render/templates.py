"""
HTML template fragments and placeholder substitution.

Fragments live under ``html/``:

- ``html/common/<piece>.html``: shared components (tabstrip, tab, genre list)
- ``html/game/<piece>.html``: generic game document pieces
- ``html/game/sections/<section>.html``: generic game sections
- ``html/game/<override>/...``: the same pieces overridden per game id, genre
  or system

Placeholders are written ``{{ key }}``, whitespace inside the braces optional.
"""

import hashlib
import html
import json
import logging
import re
from typing import Any, List, Optional

from ..catalog.game_record import GameRecord
from ..content.repository import ContentRepository, join_key
from ..errors import MissingTemplateError

logger = logging.getLogger(__name__)

TEMPLATE_ROOT = 'html'
COMMON_FOLDER = join_key(TEMPLATE_ROOT, 'common')
GAME_FOLDER = join_key(TEMPLATE_ROOT, 'game')
SECTIONS_FOLDER = 'sections'
TEMPLATE_EXTENSION = '.html'

PLACEHOLDER_PATTERN = re.compile(r'\{\{\s*([^{}]*?)\s*\}\}')

RESOURCE_PREFIX = 'resource-'
COMPONENT_PREFIX = 'component-'

# Length of the app id derived from the template hash
APP_ID_LENGTH = 8


def _to_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ','.join(_to_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def replace_placeholder(key: str, value: Any, template: str, is_html: bool = False) -> str:
    """
    Substitute every ``{{ key }}`` in a template.

    Args:
        key: Placeholder key
        value: Replacement (converted to text)
        template: Template text
        is_html: Insert the value as markup instead of HTML-escaping it

    Returns:
        Template with the placeholder replaced
    """
    pattern = re.compile(r'\{\{\s*' + re.escape(key) + r'\s*\}\}')
    text = _to_text(value)
    if not is_html:
        text = html.escape(text)
    return pattern.sub(lambda _: text, template)


def replace_resource_placeholder(key: str, value: Any, template: str) -> str:
    """Substitute a localized string (``{{ resource-<key> }}``)."""
    return replace_placeholder(RESOURCE_PREFIX + key, value, template)


def replace_component_placeholder(key: str, markup: str, template: str) -> str:
    """Substitute a rendered component (``{{ component-<key> }}``)."""
    return replace_placeholder(COMPONENT_PREFIX + key, markup, template, is_html=True)


def find_placeholders(template: str) -> List[str]:
    """Keys of every placeholder left in a template, in order of appearance."""
    return PLACEHOLDER_PATTERN.findall(template)


def compute_app_id(repository: ContentRepository) -> str:
    """
    Hash every template file into a short id.

    The id is embedded in every document file name, so a template change
    produces new URLs. Only ``.html`` files count; other files under
    ``html/`` are ignored.

    Args:
        repository: Source content repository

    Returns:
        First 8 hex characters of the SHA-256 over the raw bytes of all
        template files concatenated in sorted key order
    """
    digest = hashlib.sha256()
    for key in repository.walk(TEMPLATE_ROOT):
        if not key.lower().endswith(TEMPLATE_EXTENSION):
            continue
        digest.update(repository.read_bytes(key))
    return digest.hexdigest()[:APP_ID_LENGTH]


class TemplateRenderer:
    """Loads template fragments with game, genre and system overrides."""

    def __init__(self, repository: ContentRepository):
        """
        Initialize renderer.

        Args:
            repository: Source content repository
        """
        self.repository = repository

    def _read(self, key: str) -> str:
        try:
            return self.repository.read_text(key)
        except FileNotFoundError:
            raise MissingTemplateError(f"Missing template piece: {key}")

    def _override_folders(self, game: Optional[GameRecord]) -> List[str]:
        """Override folders, most specific first."""
        if game is None:
            return []
        folders = [game.name]
        folders.extend(reversed(game.genres))
        folders.append(game.system)
        return folders

    def _load_with_overrides(self, relative: str, game: Optional[GameRecord]) -> str:
        for folder in self._override_folders(game):
            key = join_key(GAME_FOLDER, folder, relative)
            if self.repository.exists(key):
                logger.debug(f"Using {folder} template piece: {relative}")
                return self._read(key)
        return self._read(join_key(GAME_FOLDER, relative))

    def load_common(self, piece: str) -> str:
        """Load a shared component piece (html/common/<piece>.html)."""
        return self._read(join_key(COMMON_FOLDER, f"{piece}.html"))

    def load_game_piece(self, piece: str, game: Optional[GameRecord] = None) -> str:
        """
        Load a game document piece.

        Resolution order: game id, genres (most specific first), system,
        generic.

        Args:
            piece: Piece name (e.g. 'head', 'footer')
            game: Game whose overrides apply

        Raises:
            MissingTemplateError: If not even the generic piece exists
        """
        return self._load_with_overrides(f"{piece}.html", game)

    def load_section(self, section: str, game: Optional[GameRecord] = None) -> str:
        """Load a game section piece with the same resolution order as pieces."""
        return self._load_with_overrides(join_key(SECTIONS_FOLDER, f"{section}.html"), game)

    def section_names(self) -> List[str]:
        """Names of the generic game sections (e.g. emulator, info, video)."""
        return self.repository.list_names(
            join_key(GAME_FOLDER, SECTIONS_FOLDER), ['html'], include_extension=False
        )

    def section_html(self, section: str, game: GameRecord, visible: bool) -> str:
        """Wrap a section piece in its tab panel; only the default section is visible."""
        hidden = '' if visible else ' hidden'
        return (
            f'<section role="tabpanel" id="{html.escape(section)}"{hidden}>'
            f'{self.load_section(section, game)}</section>'
        )
