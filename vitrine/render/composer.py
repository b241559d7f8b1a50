"""
Game document composition.

Assembles a game's HTML document from template pieces, then substitutes
localized strings, game fields and computed values. A document that still
holds a placeholder afterwards is never written: the whole run aborts.
"""

import datetime
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..catalog.controls import normalize_button_directions
from ..catalog.game_record import GameRecord
from ..content.repository import ContentRepository, join_key
from ..errors import UnresolvedPlaceholderError
from ..media.artwork import ArtworkSelection
from ..media.resolver import ResolvedAssets
from .localization import LocalizationBundle
from .templates import (
    TemplateRenderer,
    find_placeholders,
    replace_component_placeholder,
    replace_placeholder,
    replace_resource_placeholder,
)

logger = logging.getLogger(__name__)

VIDEO_SECTION = 'video'

# Game fields rendered from computed values instead of their raw form
COMPUTED_FIELDS = ('genres', 'players', 'buttonLabels')

# Extra images named with a leading number pick their own decoration slot
_LEADING_NUMBER = re.compile(r'\s*([+-]?\d+)')
MAX_DECORATION_INDEX = 4


def url_component(value: Optional[str]) -> str:
    """Encode a value for use inside a URL path, like encodeURIComponent."""
    return quote(value or '', safe="~()*!.'")


def _decoration_index(image: str, position: int) -> int:
    match = _LEADING_NUMBER.match(image)
    if match:
        return int(match.group(1))
    return min(position + 1, MAX_DECORATION_INDEX)


@dataclass
class DocumentSettings:
    """
    Run-wide document settings.

    Attributes:
        app_name: Application name
        author: Copyright holder
        app_id: Template hash embedded in document file names
        default_section: Section shown on load
        full_screen: Start with navigation hidden
        dosbox_type: DOSBox emulator flavor
        year: Copyright year
    """
    app_name: str
    author: str = ''
    app_id: str = ''
    default_section: str = 'emulator'
    full_screen: bool = False
    dosbox_type: str = 'dosbox'
    year: int = field(default_factory=lambda: datetime.date.today().year)


class DocumentComposer:
    """Builds game documents from template pieces."""

    def __init__(
        self,
        repository: ContentRepository,
        renderer: TemplateRenderer,
        bundle: LocalizationBundle,
        settings: DocumentSettings,
    ):
        """
        Initialize composer.

        Args:
            repository: Source content repository (style sheets, genre logos)
            renderer: Template renderer
            bundle: Localized strings of the document language
            settings: Run-wide document settings
        """
        self.repository = repository
        self.renderer = renderer
        self.bundle = bundle
        self.settings = settings
        self.sections = renderer.section_names()

        # Shared components, loaded once per run
        self.tabstrip_template = renderer.load_common('tabstrip')
        self.tab_template = renderer.load_common('tab')
        self.genre_list_template = renderer.load_common('genre-list')
        self.genre_image_item_template = renderer.load_common('genre-image-item')
        self.genre_item_template = renderer.load_common('genre-item')

    def document_key(self, game: GameRecord) -> str:
        """Output key of a game's document."""
        return join_key('games', f"{game.system.lower()}-{game.name}-{self.settings.app_id}.html")

    def compose(
        self,
        game: GameRecord,
        assets: ResolvedAssets,
        artwork: Optional[ArtworkSelection] = None,
    ) -> str:
        """
        Compose the complete HTML document of a game.

        Args:
            game: Game record
            assets: Resolved media assets
            artwork: Bezel/overlay selection (MAME games)

        Returns:
            Document text

        Raises:
            UnresolvedPlaceholderError: If any placeholder survives substitution
            MissingTemplateError: If a required template piece is missing
        """
        normalize_button_directions(game)

        sections = self._visible_sections(assets.video.success)

        document = '<head>' + self.renderer.load_game_piece('head', game) + self._inline_css(game) + '</head>'

        header = self.renderer.load_game_piece('headline-image' if assets.logo.success else 'headline', game)
        header += self.renderer.load_game_piece('navigation', game)
        header = replace_component_placeholder('tabstrip', self._tabstrip(sections), header)
        header = replace_component_placeholder('genre-list', self._genre_list(game), header)

        content = ''.join(
            self.renderer.section_html(section, game, section == self.settings.default_section)
            for section in sections
        )

        body_class = 'full-screen' if self.settings.full_screen else ''
        background = url_component(assets.background.name)
        document += (
            f'<body class="{body_class}" dir="{self.bundle.direction}" '
            f'style="background-image:url(../images/backgrounds/{background}.png)">'
        )
        document += '<header>' + header + '</header>'
        document += '<main>' + content + '</main>'
        document += '<footer>' + self.renderer.load_game_piece('footer', game) + '</footer>'
        document += self._extras(game, assets)
        document += self.renderer.load_game_piece('scripts', game)
        document += '</body>'

        document = self._substitute(document, game, assets, artwork)

        unresolved = find_placeholders(document)
        if unresolved:
            raise UnresolvedPlaceholderError(self.document_key(game), unresolved)

        return f'<!DOCTYPE html><html lang="{self.bundle.language}">{document}</html>'

    def _visible_sections(self, has_video: bool) -> List[str]:
        return [section for section in self.sections if section != VIDEO_SECTION or has_video]

    def _inline_css(self, game: GameRecord) -> str:
        keys = [join_key('style', 'game.css'), join_key('style', f"{game.system}.css")]

        for genre in reversed(game.genres):
            key = join_key('style', f"{genre}.css")
            if self.repository.exists(key):
                keys.append(key)
                break

        keys.append(join_key('style', f"{game.name}.css"))

        css = ''.join(
            '\n' + self.repository.read_text(key)
            for key in keys if self.repository.exists(key)
        )
        return f'<style>{css}</style>' if css else ''

    def _tabstrip(self, sections: List[str]) -> str:
        if self.settings.default_section in sections:
            default = self.settings.default_section
        else:
            default = sections[0] if sections else ''

        tabs = ''
        for section in sections:
            is_default = section == default
            tab = replace_placeholder('section', section, self.tab_template)
            tab = replace_placeholder('caption', section, tab)
            tab = replace_placeholder('data', 'data-autofocus' if is_default else '', tab)
            tab = replace_placeholder('tabIndex', '0' if is_default else '-1', tab)
            tab = replace_placeholder('selected', is_default, tab)
            tabs += tab

        return replace_component_placeholder('tabs', tabs, self.tabstrip_template)

    def _genre_list(self, game: GameRecord) -> str:
        items = ''
        for genre in game.genres:
            logo = join_key('images', 'logos', f"{genre} Games.png")
            if self.repository.exists(logo):
                item = replace_placeholder('name', genre, self.genre_image_item_template)
                item = replace_placeholder('source', f"../{logo}", item)
            else:
                item = replace_placeholder('name', genre, self.genre_item_template)
            items += item

        return replace_component_placeholder('genres', items, self.genre_list_template)

    def _extras(self, game: GameRecord, assets: ResolvedAssets) -> str:
        extras = assets.extras
        piece_name = 'decoration'
        if extras.found and extras.match.category:
            piece_name = f"{extras.match.category}-decoration"

        decorations = ''
        if extras.sources:
            template = self.renderer.load_common(piece_name)
            for position, key in enumerate(extras.sources):
                image = key.rsplit('/', 1)[-1]
                decoration = replace_placeholder('index', _decoration_index(image, position), template)
                decoration = replace_placeholder('source', f"../{key}", decoration)
                decorations += decoration

        extra = replace_component_placeholder('extraImages', decorations, self.renderer.load_game_piece('extras', game))
        return f'<div id="extra">{extra}</div>' if extra else ''

    def _substitute(
        self,
        document: str,
        game: GameRecord,
        assets: ResolvedAssets,
        artwork: Optional[ArtworkSelection],
    ) -> str:
        for key, value in self.bundle.items():
            document = replace_resource_placeholder(key, value, document)

        game_data = game.to_dict()

        for key, value in game_data.items():
            if key not in COMPUTED_FIELDS:
                document = replace_placeholder(key, value, document)

        for key, value in self._markup_values(game_data, assets, artwork).items():
            document = replace_placeholder(key, value, document, is_html=True)

        for key, value in self._computed_values(game).items():
            document = replace_placeholder(key, value, document)

        return document

    def _markup_values(
        self,
        game_data: Dict[str, Any],
        assets: ResolvedAssets,
        artwork: Optional[ArtworkSelection],
    ) -> Dict[str, str]:
        """Values inserted without escaping: styles, URL-encoded names and the game JSON."""
        bezel_style = ''
        overlay_style = ''
        artwork_name = ''
        bezel_image_name = ''

        if artwork is not None:
            artwork_name = url_component(artwork.artwork_name)
            bezel_image_name = url_component(artwork.bezel_image_name)
            aspect_ratio = f"aspect-ratio:{artwork.aspect_ratio_style}" if artwork.aspect_ratio_style else ''
            bezel_style = (
                f'style="background-image: url(&quot;../mame/artwork/{artwork_name}/'
                f'{bezel_image_name}.png&quot;);{aspect_ratio}"'
            )
            if artwork.overlay_image_name:
                overlay_style = (
                    f'style="background-image: url(../mame/artwork/{artwork_name}/'
                    f'{url_component(artwork.overlay_image_name)}.png)"'
                )

        return {
            'video-name': url_component(assets.video.name),
            'bezel-style': bezel_style,
            'overlay-style': overlay_style,
            'artwork-name': artwork_name,
            'bezel-image-name': bezel_image_name,
            'logo-name': url_component(assets.logo.name),
            'avatarName': url_component(assets.avatar.name),
            'avatarFolder': url_component(assets.avatar.folder),
            'iconName': url_component(assets.icon.name),
            # Keep the embedded JSON from closing its script element
            'json': json.dumps(game_data, ensure_ascii=False).replace('</', '<\\/'),
        }

    def _computed_values(self, game: GameRecord) -> Dict[str, Any]:
        if game.players == 1:
            alternating = 'N/A'
        else:
            alternating = self.bundle.get('yes') if game.alternating else self.bundle.get('no')

        return {
            # Not catalogued for every system yet
            'rating': '--',
            'story': '',
            'dosbox-emulator': self.settings.dosbox_type,
            'author': self.settings.author,
            'appName': self.settings.app_name,
            'yearCurrent': self.settings.year,
            'genres': ', '.join(game.genres),
            'players': game.players or 'NA',
            'buttonLabels': ', '.join(game.button_labels or []),
            'generalOrMature': 'mature' if game.mature else 'general',
            'alternatingYesNo': alternating,
        }
