import pytest

from vitrine.config.loader import merge_defaults
from vitrine.config.validator import ValidationError, validate_config


@pytest.fixture
def valid_config():
    """Complete valid configuration."""
    return merge_defaults({
        'app': {
            'name': 'Vitrine',
            'author': 'Somebody',
            'database': 'favorites',
            'language': 'ar',
            'default_section': 'preview',
            'full_screen': True,
        },
        'paths': {
            'source': './content',
            'output': './public',
        },
        'mame': {
            'external_emulator_location': 'https://example.org/emulators/',
            'preferred_version': '0.281',
            'romset_types': {'0.281': 'merged', '0.251': 'unmerged'},
        },
        'filters': {
            'load': 'parents',
            'publish': 'videos_and_logos',
        },
        'logging': {
            'level': 'debug',
            'console': False,
            'file': 'vitrine.log',
        },
    })


@pytest.mark.unit
def test_valid_config_passes(valid_config):
    validate_config(valid_config)


@pytest.mark.unit
def test_defaults_are_valid():
    validate_config(merge_defaults({}))


@pytest.mark.unit
@pytest.mark.parametrize(
    "section,key,value,message",
    [
        ('app', 'name', '', 'app.name'),
        ('app', 'language', 'eng', '2-letter'),
        ('app', 'full_screen', 'yes', 'app.full_screen'),
        ('paths', 'output', None, 'paths.output'),
        ('mame', 'romset_types', {'0.281': 'split'}, 'mame.romset_types.0.281'),
        ('mame', 'preferred_version', 0.281, 'quote numeric versions'),
        ('mame', 'external_emulator_location', 'ftp://host/', 'http(s) URL'),
        ('dosbox', 'type', '', 'dosbox.type'),
        ('filters', 'load', 'clones', 'filters.load'),
        ('filters', 'publish', 'covers', 'filters.publish'),
        ('logging', 'level', 'VERBOSE', 'logging.level'),
    ],
)
def test_invalid_values_rejected(valid_config, section, key, value, message):
    valid_config[section][key] = value

    with pytest.raises(ValidationError) as exc_info:
        validate_config(valid_config)

    assert message in str(exc_info.value)


@pytest.mark.unit
def test_all_errors_reported_together(valid_config):
    valid_config['app']['database'] = ''
    valid_config['filters']['publish'] = 'nothing'

    with pytest.raises(ValidationError) as exc_info:
        validate_config(valid_config)

    text = str(exc_info.value)
    assert 'app.database' in text
    assert 'filters.publish' in text
