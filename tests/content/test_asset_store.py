import json

import pytest

from vitrine.content.asset_store import AssetStore
from vitrine.content.repository import FilesystemRepository


@pytest.fixture
def store(tmp_path):
    source = tmp_path / 'src'
    (source / 'mame' / 'roms' / '0.281').mkdir(parents=True)
    (source / 'mame' / 'roms' / '0.281' / 'pacman.zip').write_bytes(b'PK')
    (source / 'icons').mkdir()
    (source / 'icons' / 'mame.ico').write_bytes(b'ico')
    return AssetStore(FilesystemRepository(source), tmp_path / 'public')


@pytest.mark.unit
def test_publish_mirrors_source_key(store):
    assert store.publish('icons/mame.ico')
    assert (store.output_root / 'icons' / 'mame.ico').read_bytes() == b'ico'


@pytest.mark.unit
def test_publish_to_explicit_destination(store):
    assert store.publish('mame/roms/0.281/pacman.zip', 'mame/roms/pacman.zip')

    assert (store.output_root / 'mame' / 'roms' / 'pacman.zip').exists()
    assert not (store.output_root / 'mame' / 'roms' / '0.281').exists()


@pytest.mark.unit
def test_publish_missing_source_returns_false(store):
    assert not store.publish('icons/galaga.ico')
    assert not (store.output_root / 'icons' / 'galaga.ico').exists()


@pytest.mark.unit
def test_write_json(store):
    path = store.write_json('mame/pacman.json', {'name': 'Pac-Man', 'native_resolution': [288, 224]}, indent=3)

    assert json.loads(path.read_text()) == {'name': 'Pac-Man', 'native_resolution': [288, 224]}
    assert '\n   "name"' in path.read_text()


@pytest.mark.unit
def test_clear_documents_only_removes_extension(store):
    games = store.output_root / 'games'
    games.mkdir(parents=True)
    (games / 'mame-pacman-0000aaaa.html').write_text('old')
    (games / 'keep.json').write_text('{}')

    assert store.clear_documents('games', 'html')

    assert [item.name for item in games.iterdir()] == ['keep.json']


@pytest.mark.unit
def test_clear_documents_creates_missing_directory(store):
    assert store.clear_documents('games', 'html')
    assert (store.output_root / 'games').is_dir()
