"""
Media asset kinds for vitrine.

Maps each asset kind to the source folder it is searched in and the file
extension(s) it uses.
"""

from enum import Enum
from typing import Dict, Tuple


class AssetKind(Enum):
    """
    Media asset kinds resolved per game.

    Artwork (bezels and overlays) is MAME-only and resolved separately.
    """
    VIDEO = 'video'
    LOGO = 'logo'
    ICON = 'icon'
    BACKGROUND = 'background'
    AVATAR = 'avatar'
    EXTRAS = 'extras'


# Source folder searched for each kind
ASSET_FOLDERS: Dict[AssetKind, str] = {
    AssetKind.VIDEO: 'video/previews',
    AssetKind.LOGO: 'images/logos',
    AssetKind.ICON: 'icons',
    AssetKind.BACKGROUND: 'images/backgrounds',
    AssetKind.AVATAR: 'images',  # + '/cabinets' or '/boxes'
    AssetKind.EXTRAS: 'images/extras',
}

ASSET_EXTENSIONS: Dict[AssetKind, str] = {
    AssetKind.VIDEO: 'mp4',
    AssetKind.LOGO: 'png',
    AssetKind.ICON: 'ico',
    AssetKind.BACKGROUND: 'png',
    AssetKind.AVATAR: 'png',
    AssetKind.EXTRAS: 'png',
}

# Avatar image folders
CABINETS_FOLDER = 'cabinets'
BOXES_FOLDER = 'boxes'

# Extra decoration images may also be animated
EXTRA_IMAGE_EXTENSIONS: Tuple[str, ...] = ('png', 'gif')

# Genre images (logos, backgrounds) are named "<genre> Games.png"
GENRE_IMAGE_SUFFIX = ' Games'


def get_folder_for_kind(kind: AssetKind) -> str:
    """
    Get the source folder for an asset kind.

    Args:
        kind: Asset kind

    Returns:
        Folder key relative to the source root (e.g. 'images/logos')
    """
    return ASSET_FOLDERS[kind]
