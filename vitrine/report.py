"""
Run-wide aggregation and reporting.

Every degrade or skip event in the build lands in an AggregateReport: a counter
per category plus the list of affected games. Each game is processed against
its own report which the run loop merges into the run report; the run report is
rendered once, at the end.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from .catalog.game_record import GameRecord

logger = logging.getLogger(__name__)

# Affected games shown per category before truncating
DEBUG_LIST_LIMIT = 10


class ReportCategory(Enum):
    """Categories of per-game and per-asset outcomes surfaced at run end."""
    SKIPPED_GAMES = 'skipped_games'
    MISSING_ROMS = 'missing_roms'
    MISSING_EMULATORS = 'missing_emulators'
    MISSING_AVATARS = 'missing_avatars'
    MISSING_SYSTEM_AVATARS = 'missing_system_avatars'
    MISSING_ARTWORK = 'missing_artwork'
    MISSING_BEZELS = 'missing_bezels'
    MISSING_GENRE_IMAGES = 'missing_genre_images'
    MISSING_LOGOS = 'missing_logos'
    MISSING_VIDEOS = 'missing_videos'
    MISSING_ICONS = 'missing_icons'
    DEFAULT_BACKGROUNDS = 'default_backgrounds'
    AMBIGUOUS_VERSIONS = 'ambiguous_versions'
    AMBIGUOUS_BEZELS = 'ambiguous_bezels'
    AMBIGUOUS_OVERLAYS = 'ambiguous_overlays'
    BIOS_MISMATCHES = 'bios_mismatches'
    EXTERNAL_EMULATORS = 'external_emulators'
    EXTERNAL_ROMS = 'external_roms'
    MISSING_METADATA = 'missing_metadata'
    RESOLUTION_MISMATCHES = 'resolution_mismatches'
    BINARY_VARIATIONS = 'binary_variations'
    BINARY_MISMATCHES = 'binary_mismatches'
    SCRIPT_MISMATCHES = 'script_mismatches'
    EXTRA_ARGUMENTS = 'extra_arguments'
    ODD_BEZEL_ASPECT_RATIOS = 'odd_bezel_aspect_ratios'


CATEGORY_LABELS: Dict[ReportCategory, str] = {
    ReportCategory.SKIPPED_GAMES: 'Skipped games',
    ReportCategory.MISSING_ROMS: 'Missing ROM files',
    ReportCategory.MISSING_EMULATORS: 'Missing emulator files',
    ReportCategory.MISSING_AVATARS: 'Missing avatar images',
    ReportCategory.MISSING_SYSTEM_AVATARS: 'Missing system avatar images',
    ReportCategory.MISSING_ARTWORK: 'Games missing MAME artwork',
    ReportCategory.MISSING_BEZELS: 'Missing MAME bezel images',
    ReportCategory.MISSING_GENRE_IMAGES: 'Missing genre images',
    ReportCategory.MISSING_LOGOS: 'Missing logos',
    ReportCategory.MISSING_VIDEOS: 'Missing preview videos',
    ReportCategory.MISSING_ICONS: 'Missing icons',
    ReportCategory.DEFAULT_BACKGROUNDS: 'Games using the system background',
    ReportCategory.AMBIGUOUS_VERSIONS: 'Games with ambiguous ROM versions',
    ReportCategory.AMBIGUOUS_BEZELS: 'Games with ambiguous bezel images',
    ReportCategory.AMBIGUOUS_OVERLAYS: 'Games with ambiguous overlay images',
    ReportCategory.BIOS_MISMATCHES: 'Games with BIOS file mismatches',
    ReportCategory.EXTERNAL_EMULATORS: 'Games referencing external emulator files',
    ReportCategory.EXTERNAL_ROMS: 'Games referencing external ROM files',
    ReportCategory.MISSING_METADATA: 'Games missing canonical meta data',
    ReportCategory.RESOLUTION_MISMATCHES: 'Games with resolution variations',
    ReportCategory.BINARY_VARIATIONS: 'Games with assembly filename variations',
    ReportCategory.BINARY_MISMATCHES: 'Assembly mismatches',
    ReportCategory.SCRIPT_MISMATCHES: 'Assembly script mismatches',
    ReportCategory.EXTRA_ARGUMENTS: 'Games with extra arguments in canonical meta data',
    ReportCategory.ODD_BEZEL_ASPECT_RATIOS: 'Games with odd bezel aspect ratios',
}

# Categories reported as informational rather than warnings
INFO_CATEGORIES: Set[ReportCategory] = {
    ReportCategory.DEFAULT_BACKGROUNDS,
    ReportCategory.EXTERNAL_EMULATORS,
    ReportCategory.EXTERNAL_ROMS,
    ReportCategory.RESOLUTION_MISMATCHES,
    ReportCategory.BINARY_VARIATIONS,
    ReportCategory.ODD_BEZEL_ASPECT_RATIOS,
}


@dataclass
class AggregateReport:
    """
    Counters and affected-game lists for one game or one whole run.

    Attributes:
        counts: Count per category (may exceed the number of affected games,
            e.g. missing ROM files)
        games: Affected games per category, in the order first recorded
        genres_used: Genres of published games
        systems_used: Systems of published games
        published: Games whose documents were written
    """
    counts: Counter = field(default_factory=Counter)
    games: Dict[ReportCategory, List['GameRecord']] = field(default_factory=dict)
    genres_used: Dict[str, None] = field(default_factory=dict)
    systems_used: Dict[str, None] = field(default_factory=dict)
    published: List['GameRecord'] = field(default_factory=list)

    def record(
        self,
        category: ReportCategory,
        game: Optional['GameRecord'] = None,
        amount: int = 1,
    ) -> None:
        """
        Record an event.

        Args:
            category: Event category
            game: Affected game (listed once per category)
            amount: Counter increment
        """
        self.counts[category] += amount
        if game is not None:
            affected = self.games.setdefault(category, [])
            if not any(existing is game for existing in affected):
                affected.append(game)

    def count(self, category: ReportCategory) -> int:
        return self.counts.get(category, 0)

    def affected(self, category: ReportCategory) -> List['GameRecord']:
        return list(self.games.get(category, []))

    def mark_published(self, game: 'GameRecord') -> None:
        self.published.append(game)
        for genre in game.genres:
            self.genres_used[genre] = None
        self.systems_used[game.system] = None

    def merge(self, other: 'AggregateReport') -> 'AggregateReport':
        """Fold another report (typically one game's) into this one."""
        for category, amount in other.counts.items():
            self.counts[category] += amount
        for category, affected in other.games.items():
            for game in affected:
                self.record(category, game, amount=0)
        self.genres_used.update(other.genres_used)
        self.systems_used.update(other.systems_used)
        self.published.extend(other.published)
        return self

    def render_summary(self, console: Optional[Console] = None) -> Table:
        """
        Print the end-of-run operator summary.

        Counts go to a table on the console; affected games are logged at
        DEBUG level.

        Args:
            console: Rich console (default: a new stdout console)

        Returns:
            The rendered table
        """
        console = console or Console()

        table = Table(
            title=f"Published {len(self.published)} game(s)",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold",
        )
        table.add_column("Category", style="bold", overflow="fold")
        table.add_column("Total", justify="right")
        table.add_column("Games", justify="right")

        for category in ReportCategory:
            total = self.count(category)
            if not total:
                continue

            style = "cyan" if category in INFO_CATEGORIES else "yellow"
            table.add_row(
                CATEGORY_LABELS[category],
                f"[{style}]{total}[/{style}]",
                str(len(self.games.get(category, []))),
            )
            self._log_affected(category)

        console.print(table)
        return table

    def _log_affected(self, category: ReportCategory) -> None:
        affected = self.games.get(category, [])
        if not affected:
            return

        logger.debug(f"{CATEGORY_LABELS[category]}:")
        for game in affected[:DEBUG_LIST_LIMIT]:
            logger.debug(f"  - {game.label}")
        if len(affected) > DEBUG_LIST_LIMIT:
            logger.debug(f"  ... and {len(affected) - DEBUG_LIST_LIMIT} more")
