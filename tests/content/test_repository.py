from pathlib import Path

import pytest

from vitrine.content.repository import FilesystemRepository, MemoryRepository, join_key


@pytest.mark.unit
def test_join_key_uses_forward_slashes():
    assert join_key('mame', 'roms', '0.281', 'pacman.zip') == 'mame/roms/0.281/pacman.zip'
    assert join_key('images', '', 'logos') == 'images/logos'


@pytest.fixture
def tree(tmp_path):
    for relative in (
        'mame/artwork/pacman/bezel.png',
        'mame/artwork/pacman/Overlay.PNG',
        'mame/artwork/pacman/pacman.lay',
        'mame/artwork/puckman/bezel.png',
        'html/game/head.html',
        'html/game/sections/info.html',
    ):
        path = tmp_path.joinpath(*relative.split('/'))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(relative)
    return tmp_path


@pytest.mark.unit
def test_filesystem_resolve(tree):
    repo = FilesystemRepository(tree)

    assert repo.resolve('mame/artwork/pacman/bezel.png') == tree / 'mame' / 'artwork' / 'pacman' / 'bezel.png'
    assert repo.resolve('mame/artwork/pacman') is None
    assert repo.resolve('mame/artwork/galaga/bezel.png') is None
    assert repo.exists('html/game/head.html')


@pytest.mark.unit
def test_filesystem_listing(tree):
    repo = FilesystemRepository(tree)

    assert repo.list_names('mame/artwork/pacman') == ['Overlay.PNG', 'bezel.png', 'pacman.lay']
    assert repo.list_names('mame/artwork/pacman', ['png']) == ['Overlay.PNG', 'bezel.png']
    assert repo.list_names('mame/artwork/pacman', ['lay'], include_extension=False) == ['pacman']
    assert repo.list_directories('mame/artwork') == ['pacman', 'puckman']
    assert repo.list_names('does/not/exist') == []
    assert repo.has_directory('mame/artwork/puckman')
    assert not repo.has_directory('mame/artwork/galaga')


@pytest.mark.unit
def test_filesystem_walk_and_read(tree):
    repo = FilesystemRepository(tree)

    assert repo.walk('html') == ['html/game/head.html', 'html/game/sections/info.html']
    assert repo.read_text('html/game/head.html') == 'html/game/head.html'

    with pytest.raises(FileNotFoundError):
        repo.read_text('html/game/footer.html')


@pytest.mark.unit
def test_memory_repository_matches_filesystem_behavior():
    repo = MemoryRepository(
        files=['images/logos/pacman.png', 'images/extras/Maze games/1.png'],
        contents={'resources.json': '{}'},
    )
    repo.add('images/extras/Maze games/2.gif')

    assert repo.resolve('images/logos/pacman.png') == Path('images/logos/pacman.png')
    assert repo.resolve('images/logos/galaga.png') is None
    assert repo.has_directory('images/extras/Maze games')
    assert repo.list_directories('images') == ['extras', 'logos']
    assert repo.list_names('images/extras/Maze games', ['png', 'gif']) == ['1.png', '2.gif']
    assert repo.read_text('resources.json') == '{}'
    assert repo.walk('images/extras') == ['images/extras/Maze games/1.png', 'images/extras/Maze games/2.gif']


@pytest.mark.unit
def test_read_bytes(tmp_path):
    (tmp_path / 'html').mkdir()
    (tmp_path / 'html' / 'logo.png').write_bytes(b'\x89PNG\xff')
    repository = FilesystemRepository(tmp_path)

    assert repository.read_bytes('html/logo.png') == b'\x89PNG\xff'
    with pytest.raises(FileNotFoundError):
        repository.read_bytes('html/missing.png')

    memory = MemoryRepository(contents={'html/head.html': 'é', 'html/raw.bin': b'\xff'})
    assert memory.read_bytes('html/head.html') == 'é'.encode('utf-8')
    assert memory.read_bytes('html/raw.bin') == b'\xff'
