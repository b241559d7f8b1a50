import hashlib

import pytest

from vitrine.content.repository import FilesystemRepository, MemoryRepository
from vitrine.errors import MissingTemplateError
from vitrine.render.templates import (
    TemplateRenderer,
    compute_app_id,
    find_placeholders,
    replace_component_placeholder,
    replace_placeholder,
    replace_resource_placeholder,
)


@pytest.mark.unit
def test_replace_placeholder_escapes_text():
    result = replace_placeholder('description', 'Tom & Jerry <2>', '<h1>{{ description }}</h1>')

    assert result == '<h1>Tom &amp; Jerry &lt;2&gt;</h1>'


@pytest.mark.unit
def test_replace_placeholder_whitespace_variants():
    template = '{{players}} {{ players }} {{   players  }}'

    assert replace_placeholder('players', 2, template) == '2 2 2'


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        (None, ''),
        (True, 'true'),
        (False, 'false'),
        (['Maze', 'Action'], 'Maze,Action'),
        (1981, '1981'),
    ],
)
def test_replace_placeholder_converts_values(value, expected):
    assert replace_placeholder('value', value, '[{{ value }}]') == f'[{expected}]'


@pytest.mark.unit
def test_markup_is_inserted_verbatim():
    assert replace_placeholder('style', 'style="a"', '<div {{ style }}>', is_html=True) == '<div style="a">'
    assert replace_component_placeholder('tabs', '<b>x</b>', '<nav>{{ component-tabs }}</nav>') == '<nav><b>x</b></nav>'


@pytest.mark.unit
def test_resource_placeholder_prefix():
    assert replace_resource_placeholder('players', 'Players', '{{ resource-players }}: {{ players }}') == (
        'Players: {{ players }}'
    )


@pytest.mark.unit
def test_replacement_text_is_not_treated_as_pattern():
    assert replace_placeholder('name', r'\1 back\slash', '{{ name }}') == r'\1 back\slash'


@pytest.mark.unit
def test_find_placeholders():
    assert find_placeholders('<p>{{ a }}{{b}}</p>{{ resource-c }}') == ['a', 'b', 'resource-c']
    assert find_placeholders('<p>{ not } one</p>') == []


@pytest.fixture
def override_repo():
    return MemoryRepository(contents={
        'html/game/head.html': 'generic',
        'html/game/mame/head.html': 'system',
        'html/game/Maze/head.html': 'maze',
        'html/game/Action/head.html': 'action',
        'html/game/pacman/head.html': 'game',
        'html/game/sections/info.html': 'info',
        'html/game/sections/emulator.html': 'emulator',
        'html/game/Action/sections/info.html': 'action info',
        'html/common/tab.html': 'tab',
    })


@pytest.mark.unit
def test_override_order(override_repo, make_game):
    renderer = TemplateRenderer(override_repo)

    assert renderer.load_game_piece('head', make_game()) == 'game'
    assert renderer.load_game_piece('head', make_game(name='mspacman')) == 'action'
    assert renderer.load_game_piece('head', make_game(name='mspacman', genre='Action/Maze')) == 'maze'
    assert renderer.load_game_piece('head', make_game(name='galaga', genre='Shooter')) == 'system'
    assert renderer.load_game_piece('head', make_game(name='doom', system='dosbox', genre='')) == 'generic'
    assert renderer.load_game_piece('head') == 'generic'


@pytest.mark.unit
def test_sections(override_repo, make_game):
    renderer = TemplateRenderer(override_repo)

    assert renderer.section_names() == ['emulator', 'info']
    assert renderer.load_section('info', make_game(name='galaga')) == 'action info'
    assert renderer.section_html('info', make_game(genre='Shooter'), visible=False) == (
        '<section role="tabpanel" id="info" hidden>info</section>'
    )
    assert renderer.section_html('emulator', make_game(), visible=True) == (
        '<section role="tabpanel" id="emulator">emulator</section>'
    )


@pytest.mark.unit
def test_missing_piece_is_fatal(override_repo):
    renderer = TemplateRenderer(override_repo)

    assert renderer.load_common('tab') == 'tab'
    with pytest.raises(MissingTemplateError):
        renderer.load_common('tabstrip')
    with pytest.raises(MissingTemplateError):
        renderer.load_game_piece('footer')


@pytest.mark.unit
def test_app_id_tracks_template_changes(override_repo):
    first = compute_app_id(override_repo)

    assert len(first) == 8
    assert int(first, 16) >= 0
    assert compute_app_id(override_repo) == first

    override_repo.add('resources.json', '{"en": {}}')
    assert compute_app_id(override_repo) == first

    override_repo.contents['html/game/head.html'] = 'changed'
    assert compute_app_id(override_repo) != first


@pytest.mark.unit
def test_app_id_hashes_raw_html_bytes_only(tmp_path):
    game_folder = tmp_path / 'html' / 'game'
    game_folder.mkdir(parents=True)
    (game_folder / 'head.html').write_bytes(b'<head>\r\n</head>')
    (game_folder / 'preview.png').write_bytes(b'\x89PNG\r\n\x1a\n\xff\xfe')
    (tmp_path / 'html' / '.DS_Store').write_bytes(b'\x00\x01\xff')

    app_id = compute_app_id(FilesystemRepository(tmp_path))

    assert app_id == hashlib.sha256(b'<head>\r\n</head>').hexdigest()[:8]
