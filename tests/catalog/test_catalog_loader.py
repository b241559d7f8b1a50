import json

import pytest

from vitrine.catalog.filters import get_load_filter
from vitrine.catalog.loader import CatalogLoader
from vitrine.content.repository import FilesystemRepository


def _write_game(root, database, filename, data):
    path = root / 'databases' / database / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data))


@pytest.mark.unit
def test_loads_and_normalizes_in_file_order(tmp_path):
    _write_game(tmp_path, 'all', 'b-simpsons.json', {
        'name': 'simpsons', 'description': 'Simpsons, The (4 Players World, set 1)',
        'system': 'mame', 'genre': 'Beat em Up',
    })
    _write_game(tmp_path, 'all', 'a-pacman.json', {
        'name': 'pacman', 'description': 'Pac-Man', 'system': 'mame',
    })

    games = CatalogLoader(FilesystemRepository(tmp_path)).load('all')

    assert [game.name for game in games] == ['pacman', 'simpsons']
    assert games[1].description == 'The Simpsons'
    assert games[1].genres == ['Beat em Up']


@pytest.mark.unit
def test_unreadable_files_are_skipped(tmp_path):
    _write_game(tmp_path, 'all', 'broken.json', '{"name": ')
    _write_game(tmp_path, 'all', 'incomplete.json', {'name': 'nosystem', 'description': 'No System'})
    _write_game(tmp_path, 'all', 'pacman.json', {'name': 'pacman', 'description': 'Pac-Man', 'system': 'mame'})
    _write_game(tmp_path, 'all', 'notes.txt', 'not a catalog file')

    games = CatalogLoader(FilesystemRepository(tmp_path)).load('all')

    assert [game.name for game in games] == ['pacman']


@pytest.mark.unit
@pytest.mark.parametrize("document", ['[1, 2]', '5', '"pacman"', 'null'])
def test_non_object_documents_are_skipped(tmp_path, document):
    _write_game(tmp_path, 'all', 'broken.json', document)
    _write_game(tmp_path, 'all', 'pacman.json', {'name': 'pacman', 'description': 'Pac-Man', 'system': 'mame'})

    games = CatalogLoader(FilesystemRepository(tmp_path)).load('all')

    assert [game.name for game in games] == ['pacman']


@pytest.mark.unit
def test_load_filter_applied(tmp_path):
    _write_game(tmp_path, 'favorites', 'pacman.json', {'name': 'pacman', 'description': 'Pac-Man', 'system': 'mame'})
    _write_game(tmp_path, 'favorites', 'mspacman.json', {
        'name': 'mspacman', 'description': 'Ms. Pac-Man', 'system': 'mame', 'cloneOf': 'pacman',
    })

    games = CatalogLoader(FilesystemRepository(tmp_path)).load('favorites', get_load_filter('parents'))

    assert [game.name for game in games] == ['pacman']


@pytest.mark.unit
def test_missing_database_gives_no_games(tmp_path):
    assert CatalogLoader(FilesystemRepository(tmp_path)).load('all') == []
