"""Catalog database loading."""

import json
import logging
from typing import Callable, List, Optional

from ..content.repository import FilesystemRepository, join_key
from .game_record import GameRecord

logger = logging.getLogger(__name__)


class CatalogLoader:
    """Loads GameRecords from databases/<name>/*.json in the source tree."""

    def __init__(self, repository: FilesystemRepository):
        """
        Initialize catalog loader.

        Args:
            repository: Source tree repository
        """
        self.repository = repository

    def load(
        self,
        database: str,
        load_filter: Optional[Callable[[GameRecord], bool]] = None,
    ) -> List[GameRecord]:
        """
        Load, normalize and filter every game in a database directory.

        Files that cannot be read or parsed are logged and skipped.

        Args:
            database: Database directory name (e.g. 'all', 'favorites')
            load_filter: Optional predicate deciding which games to keep

        Returns:
            List of normalized GameRecords, in file name order
        """
        directory = join_key('databases', database)

        if not self.repository.has_directory(directory):
            logger.warning(f"Database directory not found: {directory}")
            return []

        games: List[GameRecord] = []
        failed = 0

        for filename in self.repository.list_names(directory, ['json']):
            key = join_key(directory, filename)
            try:
                data = json.loads(self.repository.read_text(key))
                game = GameRecord.from_dict(data).normalize()
            except (OSError, ValueError) as e:
                # json.JSONDecodeError is a ValueError
                logger.error(f"Error reading or parsing catalog file {filename}: {e}")
                failed += 1
                continue

            if load_filter is not None and not load_filter(game):
                logger.debug(f"Load filter excluded {game.label}")
                continue

            games.append(game)

        if failed:
            logger.warning(f"Skipped {failed} unreadable catalog file(s) in {directory}")

        return games
