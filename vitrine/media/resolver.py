"""
Asset fallback resolution.

Every asset kind owns an ordered chain of fallback tiers. The resolver walks
a chain and stops at the first tier with a physical match; outcomes feed both
the game document (names, has-flags) and the aggregate report.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..catalog.game_record import GameRecord
from ..content.repository import ContentRepository
from ..report import AggregateReport, ReportCategory
from .media_types import AssetKind
from .strategies import (
    AssetContext,
    AssetMatch,
    FallbackTier,
    avatar_by_description,
    avatar_by_id,
    avatar_by_system,
    avatar_by_system_cabinet,
    avatar_folder,
    by_clone_parent,
    by_description,
    exact_id,
    extras_by_genre,
    extras_by_id,
    extras_by_system,
    genre_background,
    genre_icon,
    system_background,
)

logger = logging.getLogger(__name__)


FALLBACK_CHAINS: Dict[AssetKind, Tuple[FallbackTier, ...]] = {
    AssetKind.VIDEO: (
        FallbackTier('id', exact_id(AssetKind.VIDEO)),
        FallbackTier('description', by_description(AssetKind.VIDEO)),
        FallbackTier('parent', by_clone_parent(AssetKind.VIDEO)),
    ),
    AssetKind.LOGO: (
        FallbackTier('id', exact_id(AssetKind.LOGO)),
        FallbackTier('description', by_description(AssetKind.LOGO)),
    ),
    AssetKind.ICON: (
        FallbackTier('id', exact_id(AssetKind.ICON)),
        FallbackTier('parent', by_clone_parent(AssetKind.ICON)),
        FallbackTier('genre', genre_icon, degraded=True),
    ),
    AssetKind.BACKGROUND: (
        FallbackTier('id', exact_id(AssetKind.BACKGROUND)),
        FallbackTier('genre', genre_background),
        FallbackTier('system', system_background),
    ),
    AssetKind.AVATAR: (
        FallbackTier('id', avatar_by_id),
        FallbackTier('description', avatar_by_description),
        FallbackTier('system', avatar_by_system, degraded=True),
        FallbackTier('system-cabinet', avatar_by_system_cabinet, degraded=True),
    ),
    AssetKind.EXTRAS: (
        FallbackTier('id', extras_by_id),
        FallbackTier('genre', extras_by_genre),
        FallbackTier('system', extras_by_system),
    ),
}

# Category recorded when a kind is not successfully resolved
MISSING_CATEGORIES: Dict[AssetKind, ReportCategory] = {
    AssetKind.VIDEO: ReportCategory.MISSING_VIDEOS,
    AssetKind.LOGO: ReportCategory.MISSING_LOGOS,
    AssetKind.ICON: ReportCategory.MISSING_ICONS,
    AssetKind.AVATAR: ReportCategory.MISSING_AVATARS,
}


@dataclass
class AssetResolution:
    """
    Outcome of one fallback chain.

    Attributes:
        kind: Asset kind
        tried: Names of the tiers evaluated, in order
        match: The match found, if any
        degraded: The match came from a degraded tier
        default_name: Name used when nothing matched
        default_folder: Folder used when nothing matched
    """
    kind: AssetKind
    tried: List[str] = field(default_factory=list)
    match: Optional[AssetMatch] = None
    degraded: bool = False
    default_name: str = ''
    default_folder: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.match is not None

    @property
    def success(self) -> bool:
        return self.found and not self.degraded

    @property
    def tier(self) -> Optional[str]:
        return self.match.tier if self.match else None

    @property
    def name(self) -> str:
        return self.match.name if self.match else self.default_name

    @property
    def folder(self) -> Optional[str]:
        return self.match.folder if self.match else self.default_folder

    @property
    def sources(self) -> Tuple[str, ...]:
        return self.match.sources if self.match else ()


@dataclass
class ResolvedAssets:
    """Resolutions for every asset kind of one game."""
    resolutions: Dict[AssetKind, AssetResolution]

    def __getitem__(self, kind: AssetKind) -> AssetResolution:
        return self.resolutions[kind]

    @property
    def video(self) -> AssetResolution:
        return self.resolutions[AssetKind.VIDEO]

    @property
    def logo(self) -> AssetResolution:
        return self.resolutions[AssetKind.LOGO]

    @property
    def icon(self) -> AssetResolution:
        return self.resolutions[AssetKind.ICON]

    @property
    def background(self) -> AssetResolution:
        return self.resolutions[AssetKind.BACKGROUND]

    @property
    def avatar(self) -> AssetResolution:
        return self.resolutions[AssetKind.AVATAR]

    @property
    def extras(self) -> AssetResolution:
        return self.resolutions[AssetKind.EXTRAS]

    def sources(self) -> List[str]:
        """All source keys to publish for this game."""
        keys: List[str] = []
        for resolution in self.resolutions.values():
            keys.extend(resolution.sources)
        return keys


class AssetResolver:
    """Resolves media assets through per-kind fallback chains."""

    def __init__(
        self,
        repository: ContentRepository,
        chains: Optional[Dict[AssetKind, Tuple[FallbackTier, ...]]] = None,
    ):
        """
        Initialize resolver.

        Args:
            repository: Source content repository
            chains: Fallback chains per kind (default: FALLBACK_CHAINS)
        """
        self.repository = repository
        self.chains = chains or FALLBACK_CHAINS

    def resolve(self, kind: AssetKind, context: AssetContext) -> AssetResolution:
        """
        Walk the chain for one kind and stop at the first match.

        Args:
            kind: Asset kind
            context: Game context

        Returns:
            AssetResolution (never raises for missing assets)
        """
        resolution = AssetResolution(kind=kind, default_name=self._default_name(kind, context))
        if kind is AssetKind.AVATAR:
            resolution.default_folder = avatar_folder(context)

        for tier in self.chains.get(kind, ()):
            resolution.tried.append(tier.name)
            match = tier.find(context)
            if match is not None:
                resolution.match = match
                resolution.degraded = tier.degraded
                logger.debug(f"Resolved {kind.value} for {context.name} via {tier.name}: {match.name}")
                break

        return resolution

    def resolve_all(self, game: GameRecord) -> ResolvedAssets:
        """Resolve every asset kind for a game."""
        context = AssetContext.from_game(game, self.repository)
        return ResolvedAssets(
            {kind: self.resolve(kind, context) for kind in self.chains}
        )

    @staticmethod
    def _default_name(kind: AssetKind, context: AssetContext) -> str:
        # Icons, backgrounds and avatars degrade to the system's own asset
        if kind in (AssetKind.ICON, AssetKind.BACKGROUND, AssetKind.AVATAR):
            return context.system_id
        return ''


def record_asset_outcomes(assets: ResolvedAssets, game: GameRecord, report: AggregateReport) -> None:
    """
    Record missing and fallback media for a game.

    Args:
        assets: Resolved assets of the game
        game: The game
        report: Report to update
    """
    for kind, category in MISSING_CATEGORIES.items():
        resolution = assets.resolutions.get(kind)
        if resolution is None or resolution.success:
            continue
        logger.warning(f"Missing {kind.value} for {game.label}")
        report.record(category, game)

    avatar = assets.resolutions.get(AssetKind.AVATAR)
    if avatar is not None and not avatar.found:
        logger.warning(f"Missing system avatar image for {game.system}")
        report.record(ReportCategory.MISSING_SYSTEM_AVATARS, game)

    background = assets.resolutions.get(AssetKind.BACKGROUND)
    if background is not None and background.tier == 'system':
        report.record(ReportCategory.DEFAULT_BACKGROUNDS, game)
