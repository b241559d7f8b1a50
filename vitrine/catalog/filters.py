"""
Load and publish filters.

Load filters decide which catalog records enter the build. Publish filters run
after asset resolution on the game's dictionary form, augmented with the
hasVideo / hasLogo / hasIcon / hasMameArtwork flags.
"""

from typing import Any, Callable, Dict

from .game_record import GameRecord


def load_filter_all(game: GameRecord) -> bool:
    return True


def load_filter_parents(game: GameRecord) -> bool:
    """Load only parents (not clones)."""
    return not game.clone_of


def publish_filter_all(game: Dict[str, Any]) -> bool:
    return True


def publish_filter_videos(game: Dict[str, Any]) -> bool:
    return bool(game.get('hasVideo'))


def publish_filter_logos(game: Dict[str, Any]) -> bool:
    return bool(game.get('hasLogo'))


def publish_filter_icons(game: Dict[str, Any]) -> bool:
    return bool(game.get('hasIcon'))


def publish_filter_mame_artwork(game: Dict[str, Any]) -> bool:
    """MAME games must have artwork."""
    return bool(game.get('hasMameArtwork')) or str(game.get('system', '')).lower() != 'mame'


def publish_filter_videos_and_logos(game: Dict[str, Any]) -> bool:
    return bool(game.get('hasVideo')) and bool(game.get('hasLogo'))


LOAD_FILTERS: Dict[str, Callable[[GameRecord], bool]] = {
    'all': load_filter_all,
    'parents': load_filter_parents,
}

PUBLISH_FILTERS: Dict[str, Callable[[Dict[str, Any]], bool]] = {
    'all': publish_filter_all,
    'videos': publish_filter_videos,
    'logos': publish_filter_logos,
    'icons': publish_filter_icons,
    'mame_artwork': publish_filter_mame_artwork,
    'videos_and_logos': publish_filter_videos_and_logos,
}


def get_load_filter(name: str) -> Callable[[GameRecord], bool]:
    """
    Look up a load filter by configuration name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return LOAD_FILTERS[name]
    except KeyError:
        raise ValueError(f"Unknown load filter: {name}")


def get_publish_filter(name: str) -> Callable[[Dict[str, Any]], bool]:
    """
    Look up a publish filter by configuration name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return PUBLISH_FILTERS[name]
    except KeyError:
        raise ValueError(f"Unknown publish filter: {name}")
