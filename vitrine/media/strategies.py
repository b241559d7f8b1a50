"""
Fallback tiers for media asset resolution.

Each tier is a pure function of an AssetContext returning an AssetMatch or
None. Chains of tiers are assembled per asset kind in resolver.py.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..catalog.game_record import GameRecord
from ..content.repository import ContentRepository, join_key
from .media_types import (
    AssetKind,
    ASSET_EXTENSIONS,
    BOXES_FOLDER,
    CABINETS_FOLDER,
    EXTRA_IMAGE_EXTENSIONS,
    GENRE_IMAGE_SUFFIX,
    get_folder_for_kind,
)


@dataclass(frozen=True)
class AssetContext:
    """Everything a tier may look at for one game."""
    name: str
    description: str
    clone_of: Optional[str]
    genres: Tuple[str, ...]
    system: str
    is_mame: bool
    repository: ContentRepository

    @classmethod
    def from_game(cls, game: GameRecord, repository: ContentRepository) -> 'AssetContext':
        return cls(
            name=game.name,
            description=game.description,
            clone_of=game.clone_of,
            genres=tuple(game.genres),
            system=game.system,
            is_mame=game.is_mame,
            repository=repository,
        )

    @property
    def system_id(self) -> str:
        """System id as used for system-level default assets."""
        return self.system.lower()


@dataclass(frozen=True)
class AssetMatch:
    """
    A physical match for an asset.

    Attributes:
        tier: Name of the tier that matched
        name: Asset name as referenced by documents (file stem)
        sources: Source keys to publish
        folder: Folder the asset lives in (avatar folder, extras directory)
        category: Extras image category ('', 'genre' or 'system')
    """
    tier: str
    name: str
    sources: Tuple[str, ...] = ()
    folder: Optional[str] = None
    category: str = ''


Finder = Callable[[AssetContext], Optional[AssetMatch]]


@dataclass(frozen=True)
class FallbackTier:
    """
    One step in a fallback chain.

    A match from a degraded tier is used, but the asset still counts as
    missing for the game.
    """
    name: str
    find: Finder
    degraded: bool = False


def _file_tier(kind: AssetKind, tier: str, stem_of: Callable[[AssetContext], Optional[str]]) -> Finder:
    folder = get_folder_for_kind(kind)
    extension = ASSET_EXTENSIONS[kind]

    def find(context: AssetContext) -> Optional[AssetMatch]:
        stem = stem_of(context)
        if not stem:
            return None
        key = join_key(folder, f"{stem}.{extension}")
        if context.repository.exists(key):
            return AssetMatch(tier=tier, name=stem, sources=(key,))
        return None

    return find


def exact_id(kind: AssetKind) -> Finder:
    """Asset named after the machine id."""
    return _file_tier(kind, 'id', lambda context: context.name)


def by_description(kind: AssetKind) -> Finder:
    """Asset named after the display title."""
    return _file_tier(kind, 'description', lambda context: context.description)


def by_clone_parent(kind: AssetKind) -> Finder:
    """Asset named after the clone's parent machine."""
    return _file_tier(kind, 'parent', lambda context: context.clone_of)


def genre_icon(context: AssetContext) -> Optional[AssetMatch]:
    """Icon of the most specific genre (genres searched in reverse order)."""
    for genre in reversed(context.genres):
        key = join_key(get_folder_for_kind(AssetKind.ICON), f"{genre}.ico")
        if context.repository.exists(key):
            return AssetMatch(tier='genre', name=genre, sources=(key,))
    return None


def genre_background(context: AssetContext) -> Optional[AssetMatch]:
    """Background of the first genre that has one."""
    for genre in context.genres:
        name = f"{genre}{GENRE_IMAGE_SUFFIX}"
        key = join_key(get_folder_for_kind(AssetKind.BACKGROUND), f"{name}.png")
        if context.repository.exists(key):
            return AssetMatch(tier='genre', name=name, sources=(key,))
    return None


def system_background(context: AssetContext) -> Optional[AssetMatch]:
    """System-level background; always matches (published with system assets)."""
    return AssetMatch(tier='system', name=context.system_id)


def avatar_folder(context: AssetContext) -> str:
    """
    Choose the avatar image folder.

    Arcade games use cabinet images; other systems use box art when the game
    has any, cabinets otherwise.
    """
    if context.is_mame:
        return CABINETS_FOLDER

    for stem in (context.name, context.description):
        if context.repository.exists(join_key('images', BOXES_FOLDER, f"{stem}.png")):
            return BOXES_FOLDER

    return CABINETS_FOLDER


def _avatar_tier(tier: str, stem_of: Callable[[AssetContext], str], fixed_folder: Optional[str] = None) -> Finder:
    def find(context: AssetContext) -> Optional[AssetMatch]:
        folder = fixed_folder or avatar_folder(context)
        if fixed_folder and fixed_folder == avatar_folder(context):
            # Already tried as the primary folder
            return None
        stem = stem_of(context)
        key = join_key('images', folder, f"{stem}.png")
        if context.repository.exists(key):
            return AssetMatch(tier=tier, name=stem, sources=(key,), folder=folder)
        return None

    return find


avatar_by_id = _avatar_tier('id', lambda context: context.name)
avatar_by_description = _avatar_tier('description', lambda context: context.description)
avatar_by_system = _avatar_tier('system', lambda context: context.system_id)
avatar_by_system_cabinet = _avatar_tier(
    'system-cabinet', lambda context: context.system_id, fixed_folder=CABINETS_FOLDER
)


EXTRAS_ROOT = get_folder_for_kind(AssetKind.EXTRAS)


def _extras_image(
    context: AssetContext, stem: str, extension: str, category: str, tier: str
) -> Optional[AssetMatch]:
    key = join_key(EXTRAS_ROOT, f"{stem}.{extension}")
    if context.repository.exists(key):
        return AssetMatch(tier=tier, name=stem, sources=(key,), folder=EXTRAS_ROOT, category=category)
    return None


def _extras_directory(context: AssetContext, stem: str, category: str, tier: str) -> Optional[AssetMatch]:
    directory = join_key(EXTRAS_ROOT, stem)
    if not context.repository.has_directory(directory):
        return None

    images = context.repository.list_names(directory, list(EXTRA_IMAGE_EXTENSIONS))
    if not images:
        return None

    return AssetMatch(
        tier=f"{tier}-directory",
        name=stem,
        sources=tuple(join_key(directory, image) for image in images),
        folder=directory,
        category=category,
    )


def _extras_tier(category: str, tier: str, stem_of: Callable[[AssetContext], Optional[str]]) -> Finder:
    def find(context: AssetContext) -> Optional[AssetMatch]:
        stem = stem_of(context)
        if not stem:
            return None

        for extension in EXTRA_IMAGE_EXTENSIONS:
            match = _extras_image(context, stem, extension, category, tier)
            if match:
                return match

        return _extras_directory(context, stem, category, tier)

    return find


extras_by_id = _extras_tier('', 'id', lambda context: context.name)
extras_by_system = _extras_tier('system', 'system', lambda context: context.system)


def extras_by_genre(context: AssetContext) -> Optional[AssetMatch]:
    """
    Extra images of a genre ('<genre> games').

    A png for any genre wins over a gif, and a gif over a directory; within
    each, the most specific genre comes first.
    """
    stems = [f"{genre} games" for genre in reversed(context.genres)]

    for extension in EXTRA_IMAGE_EXTENSIONS:
        for stem in stems:
            match = _extras_image(context, stem, extension, 'genre', 'genre')
            if match:
                return match

    for stem in stems:
        match = _extras_directory(context, stem, 'genre', 'genre')
        if match:
            return match

    return None
