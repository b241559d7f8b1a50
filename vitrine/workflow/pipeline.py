"""
Build pipeline for vitrine.

Coordinates one complete build run:
1. Load localization, MAME versions and the catalog
2. Clear previously published documents, publish the app manifest
3. Publish shared runtime scripts and generic artwork
4. Process every game (resolve, reconcile, build manifest, compose, publish)
5. Publish assets shared by the published games
6. Print the operator summary
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console

from ..catalog.filters import get_load_filter, get_publish_filter
from ..catalog.game_record import GameRecord
from ..catalog.loader import CatalogLoader
from ..config.loader import get_config_value
from ..content.asset_store import AssetStore
from ..content.repository import FilesystemRepository, join_key
from ..errors import MissingEmulatorMetadataError, MissingRuntimeScriptError, OutputClearError
from ..mame.machines import UNDISCOVERED_ASSEMBLIES, binary_id_for, wasm_filename, wasmjs_filename
from ..mame.manifest_builder import ManifestBuilder, publish_roms
from ..mame.metadata_reconciler import LocalFacts, MetadataReconciler, ReconciledMetadata
from ..mame.version_resolver import VersionResolver, load_versions
from ..media.artwork import ARTWORK_ROOT, GENERIC_ARTWORK, ArtworkSelection, record_artwork_outcomes, select_artwork
from ..media.resolver import AssetResolver, ResolvedAssets, record_asset_outcomes
from ..render.composer import DocumentComposer, DocumentSettings
from ..render.localization import LocalizationBundle
from ..render.templates import TemplateRenderer, compute_app_id
from ..report import AggregateReport, ReportCategory
from .state import RunState

logger = logging.getLogger(__name__)

COMMON_SCRIPT = 'common.js'
COMMON_STYLE = 'common.css'

# Emulator runtime scripts every document loads
RUNTIME_SCRIPTS = (
    'browserfs.min.js',
    'browserfs.min.js.map',
    'loader.js',
    'es6-promise.js',
    'three.module.min.js',
)

DOSBOX_SYSTEM = 'dosbox'


@dataclass
class EmulatorOutcome:
    """Result of publishing a game's emulator files."""
    binary_id: Optional[str] = None
    missing: int = 0
    missing_metadata: bool = False


class CatalogBuilder:
    """
    Builds the static catalog site from a source tree.

    Games are processed one at a time; each game's outcomes are collected in
    its own AggregateReport and merged into the run report.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        console: Optional[Console] = None,
    ):
        """
        Initialize builder.

        Args:
            config: Configuration dictionary (defaults merged, validated)
            console: Rich console for the operator summary
        """
        self.config = config
        self.console = console

        self.source_root = Path(get_config_value(config, 'paths.source', '.'))
        self.output_root = Path(get_config_value(config, 'paths.output', 'public'))

        self.app_name = get_config_value(config, 'app.name', 'Vitrine')
        self.database = get_config_value(config, 'app.database', 'all')
        self.language = get_config_value(config, 'app.language', 'en')
        self.external_emulator_location = get_config_value(config, 'mame.external_emulator_location')
        self.dosbox_type = get_config_value(config, 'dosbox.type', 'dosbox')

        self.repository = FilesystemRepository(self.source_root)
        self.store = AssetStore(self.repository, self.output_root)

        self.publish_filter = get_publish_filter(get_config_value(config, 'filters.publish', 'all'))

        self.state = RunState()
        self.asset_resolver = AssetResolver(self.repository)
        self.manifest_builder = ManifestBuilder(self.repository, self.store)
        self.reconciler = MetadataReconciler(self.repository, self.state.variations)

        # Set up by run()
        self.version_resolver: Optional[VersionResolver] = None
        self.composer: Optional[DocumentComposer] = None

    def run(self) -> AggregateReport:
        """
        Run a complete build.

        Returns:
            The run report

        Raises:
            FatalBuildError: On any condition that aborts the run
            ConfigError: On configuration problems found while loading
        """
        start_time = time.time()

        logger.info(f"Building {self.app_name} in {self.language.upper()}")
        logger.info(f"Default section: {get_config_value(self.config, 'app.default_section')}")

        bundle = LocalizationBundle.load(self.repository, self.language)

        versions = load_versions(self.repository, get_config_value(self.config, 'mame.romset_types', {}) or {})
        logger.info(f"Loaded {len(versions)} MAME version(s)")

        preferred = get_config_value(self.config, 'mame.preferred_version')
        self.version_resolver = VersionResolver(
            versions, str(preferred) if preferred is not None else None, self.repository
        )

        load_filter = get_load_filter(get_config_value(self.config, 'filters.load', 'all'))
        games = CatalogLoader(self.repository).load(self.database, load_filter)
        logger.info(f"Loaded {len(games)} games from {self.database} database")

        logger.info("Deleting previously published game documents...")
        if not self.store.clear_documents('games', 'html'):
            raise OutputClearError("Failed to delete previously published game documents")

        app_id = compute_app_id(self.repository)
        logger.info(f"App ID: {app_id}")
        self.store.write_json('app.json', {'name': self.app_name, 'id': app_id})

        self.publish_runtime_assets()

        self.composer = DocumentComposer(
            self.repository,
            TemplateRenderer(self.repository),
            bundle,
            DocumentSettings(
                app_name=self.app_name,
                author=get_config_value(self.config, 'app.author', '') or '',
                app_id=app_id,
                default_section=get_config_value(self.config, 'app.default_section', 'emulator'),
                full_screen=bool(get_config_value(self.config, 'app.full_screen', False)),
                dosbox_type=self.dosbox_type,
            ),
        )

        logger.info(f"Processing {len(games)} game(s)...")
        for game in games:
            self.state.report.merge(self.process_game(game))

        self.publish_shared_assets(self.state.report)

        self.state.report.render_summary(self.console)

        if self.state.report.count(ReportCategory.MISSING_METADATA) and self.external_emulator_location:
            logger.info(
                f"Missing canonical meta data should be downloaded from: {self.external_emulator_location} "
                f"(may contain resolution and/or assembly filename variations)"
            )

        logger.info(f"Finished in {round(time.time() - start_time)} seconds")
        return self.state.report

    def publish_runtime_assets(self) -> None:
        """
        Publish scripts, style sheets and generic artwork shared by every document.

        Raises:
            MissingRuntimeScriptError: If an emulator runtime script is missing
        """
        if self.store.publish(join_key('scripts', COMMON_SCRIPT)):
            logger.info("Published common script")
        else:
            logger.warning("Missing common script!")

        for name in RUNTIME_SCRIPTS:
            if not self.store.publish(join_key('scripts', name)):
                raise MissingRuntimeScriptError(f"Missing emulator runtime script: {name}")
            logger.debug(f"Published script: {name}")

        if self.store.publish(join_key('style', COMMON_STYLE)):
            logger.info("Published common style sheet")
        else:
            logger.warning("Missing common style sheet!")

        for name in GENERIC_ARTWORK:
            directory = join_key(ARTWORK_ROOT, name)
            if not self.repository.has_directory(directory):
                logger.warning(f"Missing MAME generic artwork: {name}")
                continue

            for filename in self.repository.list_names(directory, ['lay', 'png']):
                if not self.store.publish(join_key(directory, filename)):
                    logger.warning(f"Failed to publish MAME generic artwork file: {name}/{filename}")

    def process_game(self, game: GameRecord) -> AggregateReport:
        """
        Process one game from resolution to published document.

        Args:
            game: Normalized game record

        Returns:
            The game's report

        Raises:
            FatalBuildError: On any condition that aborts the run
        """
        report = AggregateReport()
        logger.info(f"Processing game: {game.description}")

        version = self._resolve_version(game, report)

        missing_roms = publish_roms(game, version, self.store)
        if missing_roms:
            report.record(ReportCategory.MISSING_ROMS, game, missing_roms)

        emulator = self._publish_emulator(game, report)

        canonical = self.reconciler.load_canonical(game) if game.is_mame else None

        assets = self.asset_resolver.resolve_all(game)

        artwork: Optional[ArtworkSelection] = None
        metadata: Optional[ReconciledMetadata] = None

        if game.is_mame:
            artwork = select_artwork(game, self.repository)
            record_artwork_outcomes(artwork, game, report)

            vfs = self.manifest_builder.build(game, version, artwork, self.state)
            game.artwork_name = artwork.artwork_name

            metadata = self.reconciler.reconcile(
                game, LocalFacts.from_game(game, emulator.binary_id, vfs), canonical
            )
            metadata.record_outcomes(game, report)
            if metadata.wasm_program_name:
                game.wasm_program_name = metadata.wasm_program_name
            emulator.missing_metadata = metadata.missing_metadata

        skip_reason = self._skip_reason(game, missing_roms, emulator, assets, artwork)
        if skip_reason:
            logger.warning(f"[{game.name}] Skipped: {skip_reason}")
            report.record(ReportCategory.SKIPPED_GAMES, game)
            return report

        self._publish_game(game, assets, artwork, metadata, emulator, missing_roms, report)
        return report

    def _resolve_version(self, game: GameRecord, report: AggregateReport) -> str:
        if not game.is_mame:
            return ''

        resolution = self.version_resolver.resolve(game.roms, game.name, game.clone_of)
        if resolution.ambiguous:
            report.record(ReportCategory.AMBIGUOUS_VERSIONS, game)
        if resolution.resolved:
            game.roms = resolution.roms

        game.version = resolution.version
        return resolution.version

    def _publish_emulator(self, game: GameRecord, report: AggregateReport) -> EmulatorOutcome:
        system = game.system.lower()

        if system == DOSBOX_SYSTEM:
            return self._publish_dosbox(game, report)

        if game.is_mame:
            return self._publish_mame_binary(game, report)

        if not self.repository.exists(join_key(system, f"{game.name}.json")):
            raise MissingEmulatorMetadataError(f"Missing {game.system} emulator meta data for {game.name}")

        return EmulatorOutcome()

    def _publish_dosbox(self, game: GameRecord, report: AggregateReport) -> EmulatorOutcome:
        metadata_key = join_key(DOSBOX_SYSTEM, f"{self.dosbox_type}.json")
        if not self.repository.exists(metadata_key):
            raise MissingEmulatorMetadataError(f"Missing DOSBox emulator meta data: {metadata_key}")

        outcome = EmulatorOutcome(binary_id=DOSBOX_SYSTEM)
        if DOSBOX_SYSTEM in self.state.published_binaries:
            return outcome

        for extension in ('wasm.gz', 'js.gz'):
            if not self.store.publish(join_key(DOSBOX_SYSTEM, f"{self.dosbox_type}.{extension}")):
                outcome.missing += 1

        if not self.store.publish(metadata_key):
            outcome.missing_metadata = True

        if outcome.missing:
            logger.warning(f"[{game.name}] Missing {outcome.missing} DOSBox emulator file(s)")
            report.record(ReportCategory.MISSING_EMULATORS, game, outcome.missing)
        elif not outcome.missing_metadata:
            self.state.published_binaries.add(DOSBOX_SYSTEM)
            logger.info(f"Published DOSBox emulator: {self.dosbox_type}")

        return outcome

    def _publish_mame_binary(self, game: GameRecord, report: AggregateReport) -> EmulatorOutcome:
        binary_id = binary_id_for(game)
        outcome = EmulatorOutcome(binary_id=binary_id)

        if binary_id in self.state.published_binaries:
            logger.debug(f"Already published emulator: mame{binary_id}")
            return outcome

        for filename in (wasm_filename(binary_id), wasmjs_filename(binary_id)):
            if not self.store.publish(join_key('mame', filename)):
                outcome.missing += 1

        if not outcome.missing:
            self.state.published_binaries.add(binary_id)
            logger.info(f"Published emulator: mame{binary_id}")
        elif self.external_emulator_location:
            # Served from the external host instead
            game.external_emulator_location = self.external_emulator_location
        else:
            logger.warning(f"[{game.name}] Missing {outcome.missing} emulator file(s)")
            report.record(ReportCategory.MISSING_EMULATORS, game, outcome.missing)

        return outcome

    def _skip_reason(
        self,
        game: GameRecord,
        missing_roms: int,
        emulator: EmulatorOutcome,
        assets: ResolvedAssets,
        artwork: Optional[ArtworkSelection],
    ) -> Optional[str]:
        if missing_roms and not game.external_location:
            return f"missing {missing_roms} ROM(s)"

        if emulator.missing and (not game.external_emulator_location or game.name in UNDISCOVERED_ASSEMBLIES):
            return f"missing {emulator.missing} emulator file(s)"

        candidate = game.to_dict()
        candidate.update(
            hasVideo=assets.video.success,
            hasLogo=assets.logo.success,
            hasIcon=assets.icon.success,
            hasMameArtwork=artwork is not None and artwork.has_artwork,
        )
        if not self.publish_filter(candidate):
            return "filtered"

        return None

    def _publish_game(
        self,
        game: GameRecord,
        assets: ResolvedAssets,
        artwork: Optional[ArtworkSelection],
        metadata: Optional[ReconciledMetadata],
        emulator: EmulatorOutcome,
        missing_roms: int,
        report: AggregateReport,
    ) -> None:
        if emulator.missing:
            if emulator.missing_metadata:
                logger.warning(
                    f"[{game.name}] Referencing emulator file(s) at {game.external_emulator_location} "
                    f"without canonical meta data!"
                )
            else:
                logger.info(f"[{game.name}] Referencing emulator file(s) at {game.external_emulator_location}")
            report.record(ReportCategory.EXTERNAL_EMULATORS, game)

        if emulator.missing_metadata:
            if not emulator.missing:
                logger.warning(f"[{game.name}] Missing canonical meta data!")
            report.record(ReportCategory.MISSING_METADATA, game)

        if missing_roms:
            logger.info(f"[{game.name}] Referencing ROM files at {game.external_location}")
            report.record(ReportCategory.EXTERNAL_ROMS, game)

        record_asset_outcomes(assets, game, report)

        for key in assets.sources():
            if not self.store.publish(key):
                logger.warning(f"[{game.name}] Failed to publish media file: {key}")

        if metadata is not None:
            self.store.write_json(join_key('mame', f"{game.name}.json"), metadata.record, indent=3)

        document = self.composer.compose(game, assets, artwork)
        document_key = self.composer.document_key(game)
        self.store.write_text(document_key, document)
        logger.info(f"[{game.name}] Published game document: {document_key}")

        report.mark_published(game)

    def publish_shared_assets(self, report: AggregateReport) -> None:
        """
        Publish images, videos, genre logos and system assets used by the run.

        Args:
            report: Run report (genres and systems used; missing genre images
                are recorded in it)
        """
        shared: List[Tuple[str, List[str]]] = [
            ('images', ['png']),
            (join_key('images', 'shaders'), ['png']),
            ('video', ['mp4']),
        ]
        for directory, extensions in shared:
            for name in self.repository.list_names(directory, extensions):
                if not self.store.publish(join_key(directory, name)):
                    logger.warning(f"Failed to publish {directory} file: {name}")

        for genre in report.genres_used:
            if not self.store.publish(join_key('images', 'logos', f"{genre} Games.png")):
                logger.warning(f"Missing {genre} genre image!")
                report.record(ReportCategory.MISSING_GENRE_IMAGES)

        for system in report.systems_used:
            system_id = system.lower()
            if not self.store.publish(join_key('icons', f"{system_id}.ico")):
                logger.warning(f"Missing {system} system icon!")
            if not self.store.publish(join_key('images', 'backgrounds', f"{system_id}.png")):
                logger.warning(f"Missing {system} system background!")
