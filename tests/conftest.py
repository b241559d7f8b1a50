"""
Shared pytest fixtures and utilities for the vitrine test suite.
"""

import json
from pathlib import Path
from typing import Dict, Any, Callable, Optional, Tuple

import pytest
from PIL import Image

from vitrine.catalog.game_record import GameRecord
from vitrine.config.loader import merge_defaults
from vitrine.content.repository import MemoryRepository
from vitrine.workflow.pipeline import RUNTIME_SCRIPTS


# Minimal template set: every placeholder here is resolved for any game
TEMPLATES: Dict[str, str] = {
    'html/common/tabstrip.html': '<nav role="tablist">{{ component-tabs }}</nav>',
    'html/common/tab.html': (
        '<button role="tab" aria-controls="{{ section }}" tabindex="{{ tabIndex }}" '
        'aria-selected="{{ selected }}" {{ data }}>{{ caption }}</button>'
    ),
    'html/common/genre-list.html': '<ul class="genres">{{ component-genres }}</ul>',
    'html/common/genre-image-item.html': '<li><img src="{{ source }}" alt="{{ name }}"></li>',
    'html/common/genre-item.html': '<li>{{ name }}</li>',
    'html/common/decoration.html': '<img class="decoration-{{ index }}" src="{{ source }}">',
    'html/common/genre-decoration.html': '<img class="genre decoration-{{ index }}" src="{{ source }}">',
    'html/common/system-decoration.html': '<img class="system decoration-{{ index }}" src="{{ source }}">',
    'html/game/head.html': '<meta charset="utf-8"><title>{{ description }} - {{ appName }}</title>',
    'html/game/headline.html': '<h1>{{ description }}</h1>',
    'html/game/headline-image.html': '<h1><img src="../images/logos/{{ logo-name }}.png" alt="{{ description }}"></h1>',
    'html/game/navigation.html': '{{ component-tabstrip }}{{ component-genre-list }}',
    'html/game/footer.html': '<p>&copy; {{ yearCurrent }} {{ author }}</p>',
    'html/game/extras.html': '{{ component-extraImages }}',
    'html/game/scripts.html': '<script type="application/json" id="game">{{ json }}</script>',
    'html/game/sections/emulator.html': (
        '<div class="bezel" {{ bezel-style }}><div class="overlay" {{ overlay-style }}></div></div>'
    ),
    'html/game/sections/info.html': (
        '<dl><dt>{{ resource-genres }}</dt><dd>{{ genres }}</dd>'
        '<dt>{{ resource-players }}</dt><dd>{{ players }}</dd>'
        '<dd>{{ alternatingYesNo }}</dd><dd>{{ generalOrMature }}</dd></dl>'
    ),
    'html/game/sections/video.html': '<video src="../video/previews/{{ video-name }}.mp4"></video>',
}

RESOURCES: Dict[str, Dict[str, str]] = {
    'en': {'genres': 'Genres', 'players': 'Players', 'yes': 'Yes', 'no': 'No'},
    'ar': {'genres': 'الأنواع', 'players': 'اللاعبون', 'yes': 'نعم', 'no': 'لا'},
}

PACMAN: Dict[str, Any] = {
    'name': 'pacman',
    'description': 'Pac-Man',
    'system': 'mame',
    'roms': ['pacman'],
    'genre': 'Maze/Action',
    'nativeResolution': [288, 224],
    'players': 2,
    'alternating': True,
}


def write_png(path: Path, size: Tuple[int, int] = (16, 9), mode: str = 'RGBA') -> Path:
    """Write a real PNG image of the given size."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size).save(path, format='PNG')
    return path


def write_file(path: Path, content: str = '') -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


@pytest.fixture
def make_game() -> Callable[..., GameRecord]:
    """
    Build normalized GameRecords from catalog-style keyword overrides.

    Usage:
        game = make_game(name='galaga', cloneOf='galaga')
    """

    def _builder(**overrides: Any) -> GameRecord:
        data = {
            'name': 'pacman',
            'description': 'Pac-Man',
            'system': 'mame',
            'roms': ['pacman'],
            'genre': 'Maze/Action',
        }
        data.update(overrides)
        return GameRecord.from_dict(data).normalize()

    return _builder


@pytest.fixture
def png() -> Callable[..., Path]:
    """
    Write real PNG fixtures.

    Usage:
        png(tmp_path / "bezel.png", (1600, 900))
    """
    return write_png


@pytest.fixture
def memory_repo() -> MemoryRepository:
    """Empty in-memory content repository."""
    return MemoryRepository()


@pytest.fixture
def template_repo() -> MemoryRepository:
    """In-memory repository holding the minimal template set and resources."""
    contents = dict(TEMPLATES)
    contents['resources.json'] = json.dumps(RESOURCES)
    return MemoryRepository(contents=contents)


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    Write a complete source tree with one publishable MAME game (pacman).

    Layout mirrors a real content checkout: templates, localization,
    runtime scripts, one ROM version, emulator binaries, artwork and media.
    """
    root = tmp_path / 'src'

    for key, content in TEMPLATES.items():
        write_file(root / key, content)
    write_file(root / 'resources.json', json.dumps(RESOURCES))

    write_file(root / 'scripts' / 'common.js', '// common')
    for name in RUNTIME_SCRIPTS:
        write_file(root / 'scripts' / name, f'// {name}')
    write_file(root / 'style' / 'common.css', 'body {}')
    write_file(root / 'style' / 'game.css', 'main {}')

    write_file(root / 'databases' / 'all' / 'pacman.json', json.dumps(PACMAN))

    write_file(root / 'mame' / 'roms' / '0.281' / 'pacman.zip', 'rom')
    write_file(root / 'mame' / 'mamepacman.wasm.gz', 'wasm')
    write_file(root / 'mame' / 'mamepacman.js.gz', 'js')

    write_file(root / 'mame' / 'artwork' / 'pacman' / 'pacman.lay', '<mamelayout/>')
    write_png(root / 'mame' / 'artwork' / 'pacman' / 'bezel.png', (1600, 900))
    write_png(root / 'mame' / 'artwork' / 'genhorizontal' / 'bezel.png', (1600, 900))

    write_png(root / 'images' / 'logos' / 'pacman.png')
    write_png(root / 'images' / 'cabinets' / 'pacman.png')
    write_png(root / 'images' / 'backgrounds' / 'mame.png')
    write_file(root / 'video' / 'previews' / 'pacman.mp4', 'video')
    write_file(root / 'icons' / 'pacman.ico', 'icon')
    write_file(root / 'icons' / 'mame.ico', 'icon')

    return root


@pytest.fixture
def build_config(tmp_path: Path, source_tree: Path) -> Callable[..., Dict[str, Any]]:
    """
    Create a configuration dictionary pointing at the generated source tree.

    Usage:
        config = build_config({"filters": {"publish": "videos"}})
    """

    def _builder(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        base: Dict[str, Any] = {
            'paths': {
                'source': str(source_tree),
                'output': str(tmp_path / 'public'),
            },
            'mame': {
                'romset_types': {'0.281': 'merged'},
            },
        }
        if overrides:
            base = merge_dicts(base, overrides)
        return merge_defaults(base)

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow+deep merge helper for fixture config dictionaries.
    """
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
