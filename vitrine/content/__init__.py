"""
Content access package for vitrine.

Resolves logical keys in the source tree and publishes files to the output tree.
"""

from .repository import ContentRepository, FilesystemRepository, MemoryRepository, join_key
from .asset_store import AssetStore

__all__ = [
    "ContentRepository",
    "FilesystemRepository",
    "MemoryRepository",
    "join_key",
    "AssetStore",
]
