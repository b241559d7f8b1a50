"""Selection of the MAME ROM dump-set version for a game.

Several releases of the ROM content may live side by side under
``mame/roms/<version>/``. Each version is either a merged romset (a clone's
unique content is bundled in its parent's archive) or an unmerged one.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..config.loader import ConfigError
from ..content.repository import ContentRepository, join_key

logger = logging.getLogger(__name__)

ROMS_ROOT = join_key('mame', 'roms')


class MergeMode(Enum):
    """Romset merge conventions."""
    MERGED = 'merged'
    UNMERGED = 'unmerged'


@dataclass(frozen=True)
class DumpSetVersion:
    """One ROM dump-set version directory."""
    id: str
    merge_mode: MergeMode = MergeMode.UNMERGED

    def required_roms(self, roms: Iterable[str], machine_id: str, clone_of: Optional[str]) -> List[str]:
        """
        ROM ids that must exist for a game under this version.

        A clone under a merged romset does not need its own archive (its
        content is in the parent's).
        """
        if self.merge_mode is MergeMode.MERGED and clone_of:
            return [rom for rom in roms if rom != machine_id]
        return list(roms)

    def rom_key(self, rom: str) -> str:
        return join_key(ROMS_ROOT, self.id, f"{rom}.zip")

    def is_complete(
        self,
        roms: Iterable[str],
        repository: ContentRepository,
        machine_id: str = '',
        clone_of: Optional[str] = None,
    ) -> bool:
        """Check that every required ROM archive exists under this version."""
        return all(
            repository.exists(self.rom_key(rom))
            for rom in self.required_roms(roms, machine_id, clone_of)
        )


@dataclass
class VersionResolution:
    """
    Outcome of version selection.

    Attributes:
        version: Selected version id, or '' when no version is complete
        ambiguous: Several versions were complete and none was preferred
        roms: Final ROM list (a merged clone's own ROM removed)
        candidates: Ids of every complete version, in declared order
    """
    version: str
    ambiguous: bool = False
    roms: List[str] = field(default_factory=list)
    candidates: List[str] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return bool(self.version)


def load_versions(
    repository: ContentRepository,
    romset_types: Dict[str, str],
) -> List[DumpSetVersion]:
    """
    Discover version directories and pair them with configured merge modes.

    Ordering follows the declaration order of ``romset_types``.

    Args:
        repository: Source content repository
        romset_types: Mapping of version id to 'merged' / 'unmerged'

    Returns:
        List of DumpSetVersion in declared order

    Raises:
        ConfigError: If a version directory has no declared romset type
    """
    directories = repository.list_directories(ROMS_ROOT)

    # YAML reads unquoted versions (0.281) as numbers
    declared = {str(version_id): mode for version_id, mode in romset_types.items()}

    undeclared = [name for name in directories if name not in declared]
    if undeclared:
        raise ConfigError(
            f"Missing MAME romset info for version(s): {', '.join(undeclared)}"
        )

    versions = []
    for version_id, mode in declared.items():
        if version_id not in directories:
            logger.warning(f"Configured MAME version has no ROM directory: {version_id}")
            continue
        versions.append(DumpSetVersion(version_id, MergeMode(mode)))

    return versions


class VersionResolver:
    """Picks the best complete dump-set version for each MAME game."""

    def __init__(
        self,
        versions: List[DumpSetVersion],
        preferred_version: Optional[str],
        repository: ContentRepository,
    ):
        """
        Initialize resolver.

        Args:
            versions: Candidate versions in declared order
            preferred_version: Version to select whenever it is complete
            repository: Source content repository
        """
        self.versions = versions
        self.preferred_version = preferred_version
        self.repository = repository

    def get_version(self, version_id: str) -> Optional[DumpSetVersion]:
        for version in self.versions:
            if version.id == version_id:
                return version
        return None

    def resolve(
        self,
        roms: List[str],
        machine_id: str,
        clone_of: Optional[str] = None,
    ) -> VersionResolution:
        """
        Select a version for a game.

        Args:
            roms: Required ROM ids from the catalog
            machine_id: Machine id of the game
            clone_of: Parent machine id for clones

        Returns:
            VersionResolution with the selected version and final ROM list
        """
        candidates = [
            version for version in self.versions
            if version.is_complete(roms, self.repository, machine_id, clone_of)
        ]
        candidate_ids = [version.id for version in candidates]

        ambiguous = False

        if self.preferred_version and self.preferred_version in candidate_ids:
            selected: Optional[DumpSetVersion] = self.get_version(self.preferred_version)
        elif len(candidates) == 1:
            selected = candidates[0]
        elif candidates:
            ambiguous = True
            selected = candidates[0]
            logger.warning(
                f"Multiple ROM versions found for {machine_id}: {', '.join(candidate_ids)} "
                f"(using {selected.id})"
            )
        else:
            selected = None

        if selected is None:
            logger.debug(f"No complete ROM version for {machine_id}")
            return VersionResolution(version='', roms=list(roms), candidates=[])

        return VersionResolution(
            version=selected.id,
            ambiguous=ambiguous,
            roms=selected.required_roms(roms, machine_id, clone_of),
            candidates=candidate_ids,
        )
