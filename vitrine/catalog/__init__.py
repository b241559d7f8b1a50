"""
Catalog package for vitrine.

Loads game records from catalog databases and normalizes them.
"""

from .game_record import GameRecord, parse_genres, normalize_description
from .loader import CatalogLoader
from .filters import get_load_filter, get_publish_filter
from .controls import normalize_button_directions

__all__ = [
    'GameRecord',
    'parse_genres',
    'normalize_description',
    'CatalogLoader',
    'get_load_filter',
    'get_publish_filter',
    'normalize_button_directions',
]
