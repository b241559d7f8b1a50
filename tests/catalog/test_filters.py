import pytest

from vitrine.catalog.filters import get_load_filter, get_publish_filter


@pytest.mark.unit
def test_parents_filter_drops_clones(make_game):
    parents = get_load_filter('parents')

    assert parents(make_game())
    assert not parents(make_game(name='mspacman', cloneOf='pacman'))


@pytest.mark.unit
def test_all_filters_keep_everything(make_game):
    assert get_load_filter('all')(make_game(cloneOf='puckman'))
    assert get_publish_filter('all')({})


@pytest.mark.unit
@pytest.mark.parametrize(
    "name,flags,expected",
    [
        ('videos', {'hasVideo': True}, True),
        ('videos', {'hasVideo': False}, False),
        ('logos', {'hasLogo': True}, True),
        ('icons', {}, False),
        ('videos_and_logos', {'hasVideo': True, 'hasLogo': False}, False),
        ('videos_and_logos', {'hasVideo': True, 'hasLogo': True}, True),
    ],
)
def test_publish_filters_read_asset_flags(name, flags, expected):
    assert get_publish_filter(name)(dict(flags, system='mame')) is expected


@pytest.mark.unit
def test_mame_artwork_filter_only_applies_to_mame():
    mame_artwork = get_publish_filter('mame_artwork')

    assert not mame_artwork({'system': 'mame', 'hasMameArtwork': False})
    assert mame_artwork({'system': 'mame', 'hasMameArtwork': True})
    assert mame_artwork({'system': 'dosbox', 'hasMameArtwork': False})


@pytest.mark.unit
def test_unknown_filter_names_raise():
    with pytest.raises(ValueError):
        get_load_filter('clones')
    with pytest.raises(ValueError):
        get_publish_filter('covers')
