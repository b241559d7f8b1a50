"""
Media resolution package for vitrine.

Resolves per-game media (videos, logos, icons, backgrounds, avatars, extra
images) through fallback chains, and selects MAME bezel/overlay artwork.
"""

from .media_types import AssetKind, ASSET_FOLDERS, get_folder_for_kind
from .strategies import AssetContext, AssetMatch, FallbackTier
from .resolver import (
    AssetResolution,
    AssetResolver,
    FALLBACK_CHAINS,
    ResolvedAssets,
    record_asset_outcomes,
)
from .artwork import (
    ArtworkSelection,
    GENERIC_ARTWORK,
    generic_artwork_for,
    record_artwork_outcomes,
    select_artwork,
)

__all__ = [
    "AssetKind",
    "ASSET_FOLDERS",
    "get_folder_for_kind",
    "AssetContext",
    "AssetMatch",
    "FallbackTier",
    "AssetResolution",
    "AssetResolver",
    "FALLBACK_CHAINS",
    "ResolvedAssets",
    "record_asset_outcomes",
    "ArtworkSelection",
    "GENERIC_ARTWORK",
    "generic_artwork_for",
    "record_artwork_outcomes",
    "select_artwork",
]
