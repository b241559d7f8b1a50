"""
Reconciliation of local game facts with canonical MAME metadata.

Canonical metadata (``mame/<machine>.json``) ships with the emulator binaries
and is treated as the source of truth for the native resolution and binary
file names. Local facts come from the catalog and the freshly built virtual
file system. The reconciler merges both into the record published as
``mame/<machine>.json`` and flags every divergence for the run report.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..catalog.game_record import GameRecord
from ..content.repository import ContentRepository, join_key
from ..errors import CorruptMetadataError
from ..report import AggregateReport, ReportCategory
from .machines import MIRROR_ROTATION_MACHINE, wasm_filename, wasm_program_key, wasmjs_filename
from .manifest_builder import VirtualFileSystem

logger = logging.getLogger(__name__)

# Fields only ever written by the build; their presence on input means the
# source was corrupted or already processed.
OUTPUT_ONLY_FIELDS = ('virtual_file_system', 'files')

# Published by the Internet Archive for vector games
VECTOR_RESOLUTION = [0, 0]


def check_output_fields(machine: str, canonical: Dict[str, Any]) -> None:
    """
    Reject canonical metadata that already holds build output.

    Raises:
        CorruptMetadataError: If an output-only field is present
    """
    for field_name in OUTPUT_ONLY_FIELDS:
        if field_name in canonical:
            raise CorruptMetadataError(machine, field_name)


class BinaryVariationCache:
    """
    File-location maps of binaries that deviate from the naming convention.

    Populated while games are processed: a variation discovered on one game is
    reused for later games sharing the binary id that have no canonical
    metadata of their own. Games processed before the discovery keep the
    conventional map.
    """

    def __init__(self):
        self._file_locations: Dict[str, Dict[str, str]] = {}
        # binary id -> [games needing the override, games seen]
        self._counts: Dict[str, List[int]] = {}

    def lookup(self, binary_id: str) -> Optional[Dict[str, str]]:
        return self._file_locations.get(binary_id)

    def record_variation(self, binary_id: str, file_locations: Dict[str, str]) -> None:
        self._file_locations[binary_id] = dict(file_locations)
        counts = self._counts.setdefault(binary_id, [0, 0])
        counts[0] += 1
        counts[1] += 1

    def record_conventional(self, binary_id: str) -> None:
        if binary_id in self._counts:
            self._counts[binary_id][1] += 1

    def confidence(self, binary_id: str) -> float:
        """Share of games seen for a binary id that needed the override."""
        overrides, total = self._counts.get(binary_id, [0, 0])
        if not total:
            return 0.0
        return overrides / total

    def __contains__(self, binary_id: str) -> bool:
        return binary_id in self._file_locations

    def __len__(self) -> int:
        return len(self._file_locations)


@dataclass
class LocalFacts:
    """
    Locally derived facts about a MAME game.

    Attributes:
        binary_id: Emulator binary id (driver)
        native_resolution: Catalogued [width, height], None for vector games
        bios_files: Catalogued bios ids (None when the game declares none)
        virtual_file_system: The game's freshly built manifest
    """
    binary_id: str
    native_resolution: Optional[List[int]] = None
    bios_files: Optional[List[str]] = None
    virtual_file_system: VirtualFileSystem = field(default_factory=VirtualFileSystem)

    @classmethod
    def from_game(cls, game: GameRecord, binary_id: str, vfs: VirtualFileSystem) -> 'LocalFacts':
        return cls(
            binary_id=binary_id,
            native_resolution=list(game.native_resolution) if game.native_resolution else None,
            bios_files=list(game.bios_files) if game.bios_files is not None else None,
            virtual_file_system=vfs,
        )


@dataclass
class ReconciledMetadata:
    """Publishable metadata record plus the divergences found."""
    record: Dict[str, Any]
    native_resolution: List[int]
    missing_metadata: bool = False
    resolution_mismatch: bool = False
    binary_mismatch: bool = False
    script_mismatch: bool = False
    variation: bool = False
    bios_mismatch: bool = False
    extra_arguments: bool = False
    wasm_program_name: Optional[str] = None

    def record_outcomes(self, game: GameRecord, report: AggregateReport) -> None:
        """
        Record divergences in a report.

        Missing metadata is recorded by the pipeline, which only counts it
        for published games.
        """
        if self.resolution_mismatch:
            report.record(ReportCategory.RESOLUTION_MISMATCHES, game)
        if self.binary_mismatch:
            report.record(ReportCategory.BINARY_MISMATCHES, game)
        if self.script_mismatch:
            report.record(ReportCategory.SCRIPT_MISMATCHES, game)
        if self.variation:
            report.record(ReportCategory.BINARY_VARIATIONS, game)
        if self.bios_mismatch:
            report.record(ReportCategory.BIOS_MISMATCHES, game)
        if self.extra_arguments:
            report.record(ReportCategory.EXTRA_ARGUMENTS, game)


class MetadataReconciler:
    """Merges canonical MAME metadata with local facts."""

    def __init__(self, repository: ContentRepository, variations: BinaryVariationCache):
        """
        Initialize reconciler.

        Args:
            repository: Source content repository
            variations: Run-wide binary variation cache
        """
        self.repository = repository
        self.variations = variations

    def load_canonical(self, game: GameRecord) -> Optional[Dict[str, Any]]:
        """
        Load canonical metadata for a game, or its clone parent.

        A file that cannot be read or parsed is reported and treated as
        missing.

        Args:
            game: MAME game record

        Returns:
            Canonical metadata dict, or None

        Raises:
            CorruptMetadataError: If the metadata contains an output-only field
        """
        candidates = [game.name]
        if game.clone_of:
            candidates.append(game.clone_of)

        for machine in candidates:
            key = join_key('mame', f"{machine}.json")
            if not self.repository.exists(key):
                continue

            try:
                data = json.loads(self.repository.read_text(key))
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load meta data {key}: {e}")
                return None

            if not isinstance(data, dict):
                logger.warning(f"Failed to load meta data {key}: not a JSON object")
                return None

            check_output_fields(machine, data)
            logger.debug(f"Loaded meta data from {machine}.json")
            return data

        return None

    def reconcile(
        self,
        game: GameRecord,
        facts: LocalFacts,
        canonical: Optional[Dict[str, Any]],
    ) -> ReconciledMetadata:
        """
        Produce the publishable metadata record for a game.

        Args:
            game: MAME game record (native_resolution updated in place)
            facts: Local facts
            canonical: Canonical metadata (None when absent)

        Returns:
            ReconciledMetadata

        Raises:
            CorruptMetadataError: If canonical metadata contains an output-only field
        """
        binary_id = facts.binary_id

        if canonical is not None:
            check_output_fields(game.name, canonical)

            record = dict(canonical)
            record['name'] = game.description
            record['driver'] = binary_id
            record['machine_name'] = game.name
            result = ReconciledMetadata(record=record, native_resolution=[])
        else:
            result = self._fabricate(game, binary_id)
            record = result.record

        if record.get('js_filename'):
            logger.warning(f'Canonical meta data for {game.name} has "js_filename" property')

        extra_args = record.get('extra_args')
        if extra_args and extra_args[0]:
            logger.warning(f"Extra arguments in canonical meta data for {game.name}: {extra_args}")
            result.extra_arguments = True

        record.update(facts.virtual_file_system.to_metadata())
        record['keep_aspect'] = True

        self._reconcile_resolution(game, facts, canonical, result)
        self._check_binary_names(binary_id, result)
        self._track_variation(binary_id, result)
        self._reconcile_bios(facts, result)

        return result

    def _fabricate(self, game: GameRecord, binary_id: str) -> ReconciledMetadata:
        logger.info(f"Creating meta data for {game.label}")

        record: Dict[str, Any] = {
            'name': game.description,
            'arcade': '1',
            'peripherals': [''],
            'extra_args': [''],
            'driver': binary_id,
            'machine_name': game.name,
            'wasmjs_filename': wasmjs_filename(binary_id),
            'wasm_filename': wasm_filename(binary_id),
            'file_locations': {},
        }
        result = ReconciledMetadata(record=record, native_resolution=[], missing_metadata=True)

        cached = self.variations.lookup(binary_id)
        if cached:
            confidence = self.variations.confidence(binary_id)
            logger.info(f"Fixing file location variation(s) for {binary_id}")
            if confidence < 1:
                logger.warning(f"With less than 100% confidence ({int(confidence * 100)}%)")
            record['file_locations'] = dict(cached)
            result.wasm_program_name = next(iter(cached))
        else:
            record['file_locations'][wasm_program_key(binary_id)] = wasm_filename(binary_id)

        return result

    def _reconcile_resolution(
        self,
        game: GameRecord,
        facts: LocalFacts,
        canonical: Optional[Dict[str, Any]],
        result: ReconciledMetadata,
    ) -> None:
        local = facts.native_resolution
        authoritative = canonical.get('native_resolution') if canonical else None

        if authoritative:
            published = list(authoritative)
            if local and published != local:
                swapped = published[0] == local[1] and published[1] == local[0]
                if swapped and game.name == MIRROR_ROTATION_MACHINE:
                    logger.debug(f"Resolution swapped by mirror rotation for {game.name}")
                else:
                    for axis, label in enumerate(('width', 'height')):
                        if published[axis] != local[axis]:
                            logger.info(
                                f"Resolution {label} variation for {game.name}: "
                                f"{published[axis]} (canonical) vs {local[axis]} (catalog)"
                            )
                            result.resolution_mismatch = True
        elif local:
            published = list(local)
        else:
            # TODO: Warn only for raster displays once the catalog records the display type
            published = list(VECTOR_RESOLUTION)

        result.native_resolution = published
        result.record['native_resolution'] = published

        if authoritative or local:
            game.native_resolution = list(published)

    def _check_binary_names(self, binary_id: str, result: ReconciledMetadata) -> None:
        record = result.record
        expected_script = wasmjs_filename(binary_id)
        expected_binary = wasm_filename(binary_id)

        if record.get('wasmjs_filename') and record['wasmjs_filename'] != expected_script:
            logger.warning(f'Assembly script mismatch: "{record["wasmjs_filename"]}" is not "{expected_script}"')
            result.script_mismatch = True

        if record.get('wasm_filename') and record['wasm_filename'] != expected_binary:
            logger.warning(f'Assembly mismatch: "{record["wasm_filename"]}" is not "{expected_binary}"')
            result.binary_mismatch = True

    def _track_variation(self, binary_id: str, result: ReconciledMetadata) -> None:
        file_locations = result.record.get('file_locations') or {}

        if wasm_program_key(binary_id) not in file_locations:
            logger.info(f'Assembly filename variation: "{wasm_program_key(binary_id)}" not used')
            self.variations.record_variation(binary_id, file_locations)
            result.variation = True
        else:
            self.variations.record_conventional(binary_id)

    def _reconcile_bios(self, facts: LocalFacts, result: ReconciledMetadata) -> None:
        if facts.bios_files is None:
            return

        record = result.record
        computed = [f"{bios}.zip" for bios in facts.bios_files]
        canonical_bios = record.get('bios_filenames')

        if canonical_bios and computed and canonical_bios[0] != computed[0]:
            if canonical_bios[0]:
                logger.warning(f'BIOS mismatch: "{canonical_bios[0]}" is not "{computed[0]}"')
                result.bios_mismatch = True
            else:
                logger.debug(f'BIOS file "{computed[0]}" not listed in canonical meta data')

        record['bios_filenames'] = computed or ['']
