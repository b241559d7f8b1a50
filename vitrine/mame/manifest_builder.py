"""
Per-game virtual file system construction.

The in-browser emulator fetches every file listed in a game's manifest and
mounts it under the logical name given. ROMs are always listed; samples, disks,
NVRAM, artwork, the shared controller file and per-game configuration are
added when they exist and publish.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..catalog.game_record import GameRecord
from ..content.asset_store import AssetStore
from ..content.repository import ContentRepository, join_key
from ..media.artwork import ARTWORK_ROOT, ArtworkSelection
from .version_resolver import ROMS_ROOT

if TYPE_CHECKING:
    from ..workflow.state import RunState

logger = logging.getLogger(__name__)

CONTROLLER_KEY = join_key('mame', 'ctrlr', 'default.cfg')


@dataclass(frozen=True)
class VirtualFile:
    """A file mounted by the emulator: logical name and URL relative to the document."""
    name: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'url': self.url}


@dataclass
class VirtualFileSystem:
    """
    Manifest of runtime-loadable files for one game.

    Attributes:
        roms: ROM archives
        files: Disks, NVRAM, artwork, controller and cfg files
        samples: Samples archive name, if the game has one
    """
    roms: List[VirtualFile] = field(default_factory=list)
    files: List[VirtualFile] = field(default_factory=list)
    samples: Optional[str] = None

    def add(self, name: str, url: str) -> None:
        self.files.append(VirtualFile(name, url))

    def names(self) -> List[str]:
        return [entry.name for entry in self.roms + self.files]

    def to_metadata(self) -> Dict[str, Any]:
        """Output fields for the published metadata record."""
        virtual_file_system: Dict[str, Any] = {
            'files': [entry.to_dict() for entry in self.files],
        }
        if self.samples:
            virtual_file_system['samples'] = self.samples

        return {
            'files': [entry.to_dict() for entry in self.roms],
            'virtual_file_system': virtual_file_system,
        }


def rom_source_key(game: GameRecord, rom: str, version: str = '') -> str:
    if game.is_mame:
        return join_key(ROMS_ROOT, version, f"{rom}.zip")
    return join_key(game.system.lower(), 'roms', f"{rom}.zip")


def rom_output_key(game: GameRecord, rom: str) -> str:
    if game.is_mame:
        return join_key(ROMS_ROOT, f"{rom}.zip")
    return join_key(game.system.lower(), 'roms', f"{rom}.zip")


def publish_roms(game: GameRecord, version: str, store: AssetStore) -> int:
    """
    Publish a game's ROM archives.

    MAME archives are copied out of their version directory into the flat
    ``mame/roms/``; a MAME game without a resolved version has every ROM
    missing.

    Args:
        game: Game record (roms already adjusted for merged romsets)
        version: Resolved MAME version ('' when unresolved or not MAME)
        store: Asset store

    Returns:
        Number of missing ROM archives
    """
    if game.is_mame and not version:
        return len(game.roms)

    missing = 0
    for rom in game.roms:
        if store.publish(rom_source_key(game, rom, version), rom_output_key(game, rom)):
            logger.debug(f"Published ROM file: {rom}.zip")
        else:
            missing += 1

    return missing


class ManifestBuilder:
    """Publishes MAME runtime files and lists them in a VirtualFileSystem."""

    def __init__(self, repository: ContentRepository, store: AssetStore):
        """
        Initialize manifest builder.

        Args:
            repository: Source content repository
            store: Asset store used to publish each file
        """
        self.repository = repository
        self.store = store

    def build(
        self,
        game: GameRecord,
        version: str,
        artwork: Optional[ArtworkSelection],
        run_state: 'RunState',
    ) -> VirtualFileSystem:
        """
        Build the virtual file system of a MAME game.

        Optional categories that fail to publish are logged and left out.

        Args:
            game: MAME game record (disks, nvram_files, artwork_files are set)
            version: Resolved ROM version ('' when unresolved)
            artwork: Artwork selection for the game
            run_state: Run-wide state (controller file flag)

        Returns:
            VirtualFileSystem for the game
        """
        vfs = VirtualFileSystem(
            roms=[VirtualFile(f"{rom}.zip", f"../mame/roms/{rom}.zip") for rom in game.roms]
        )

        self._add_samples(game, vfs)
        if version:
            self._add_disks(game, version, vfs)
        self._add_nvram(game, vfs)
        if artwork is not None and artwork.has_artwork:
            self._add_artwork(game, artwork, vfs)
        self._add_controller(vfs, run_state)
        self._add_cfg(game, vfs)

        return vfs

    def _add_samples(self, game: GameRecord, vfs: VirtualFileSystem) -> None:
        key = join_key('mame', 'samples', f"{game.name}.zip")
        if not self.repository.exists(key):
            return

        if self.store.publish(key):
            vfs.samples = f"{game.name}_samples"
            logger.debug(f"Published sound samples: {game.name}.zip")
        else:
            logger.warning(f"Failed to publish sound samples for {game.label}")

    def _add_disks(self, game: GameRecord, version: str, vfs: VirtualFileSystem) -> None:
        directory = join_key(ROMS_ROOT, version, game.name)
        if not self.repository.has_directory(directory):
            return

        game.disks = []
        for disk in self.repository.list_names(directory, ['chd']):
            if self.store.publish(join_key(directory, disk), join_key(ROMS_ROOT, game.name, disk)):
                vfs.add(disk, f"../mame/roms/{game.name}/{disk}")
                game.disks.append(disk)
                logger.debug(f"Published disk file: {disk}")
            else:
                logger.warning(f"Failed to publish disk file: {disk}")

    def _add_nvram(self, game: GameRecord, vfs: VirtualFileSystem) -> None:
        directory = join_key('mame', 'nvram', game.name)
        if not self.repository.has_directory(directory):
            return

        files = self.repository.list_names(directory)
        for name in files:
            if self.store.publish(join_key(directory, name)):
                vfs.add(name, f"../mame/nvram/{game.name}/{name}")
                logger.debug(f"Published NVRAM file: {name}")
            else:
                logger.warning(f"Failed to publish NVRAM file: {name}")

        game.nvram_files = files

    def _add_artwork(
        self,
        game: GameRecord,
        artwork: ArtworkSelection,
        vfs: VirtualFileSystem,
    ) -> None:
        source = artwork.source_name
        logger.debug(f"Publishing MAME artwork files for {source}")

        for name in artwork.layout_files + artwork.image_files:
            key = join_key(ARTWORK_ROOT, source, name)
            if self.store.publish(key):
                vfs.add(f"artwork/{name}", f"../mame/artwork/{source}/{name}")
            else:
                logger.warning(f"Failed to publish MAME artwork file: {name}")

        game.artwork_files = artwork.image_files + artwork.layout_files

    def _add_controller(self, vfs: VirtualFileSystem, run_state: 'RunState') -> None:
        if not self.repository.exists(CONTROLLER_KEY):
            return

        if not run_state.controller_published:
            if not self.store.publish(CONTROLLER_KEY):
                logger.warning("Failed to publish controller file: default.cfg")
                return
            run_state.controller_published = True
            logger.debug("Published controller file: default.cfg")

        vfs.add('ctrlr/default.cfg', '../mame/ctrlr/default.cfg')

    def _add_cfg(self, game: GameRecord, vfs: VirtualFileSystem) -> None:
        key = join_key('mame', 'cfg', f"{game.name}.cfg")
        if not self.repository.exists(key):
            return

        if self.store.publish(key):
            vfs.add(f"cfg/{game.name}.cfg", f"../mame/cfg/{game.name}.cfg")
            logger.debug(f"Published configuration file: {game.name}.cfg")
        else:
            logger.warning(f"Failed to publish configuration file: {game.name}.cfg")
