"""
MAME bezel and overlay artwork selection.

Artwork lives in ``mame/artwork/<machine>/`` as layout (.lay) and image (.png)
files. One image is chosen as the bezel drawn around the emulator screen and,
optionally, one transparent overlay image drawn above it. Games without usable
artwork fall back to the generic horizontal or vertical bezel.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..catalog.game_record import GameRecord
from ..content.repository import ContentRepository, join_key
from ..report import AggregateReport, ReportCategory

logger = logging.getLogger(__name__)

ARTWORK_ROOT = join_key('mame', 'artwork')

GENERIC_HORIZONTAL = 'genhorizontal'
GENERIC_VERTICAL = 'genvertical'
GENERIC_ARTWORK = (GENERIC_HORIZONTAL, GENERIC_VERTICAL)
GENERIC_BEZEL = 'bezel'

OVERLAY_IMAGE = 'overlay'


@dataclass
class ArtworkSelection:
    """
    Outcome of artwork selection for one game.

    Attributes:
        artwork_name: Directory the bezel (and overlay) are served from
        bezel_image_name: Bezel image stem
        overlay_image_name: Overlay image stem, if exactly one exists
        source_name: Artwork directory found for the game (its own or its
            parent's); None when the game has no artwork
        layout_files: Layout file names of the source directory
        image_files: Image file names of the source directory
        aspect_ratio_style: CSS aspect ratio ('' for 16:9)
    """
    artwork_name: str
    bezel_image_name: str = GENERIC_BEZEL
    overlay_image_name: Optional[str] = None
    source_name: Optional[str] = None
    layout_files: List[str] = field(default_factory=list)
    image_files: List[str] = field(default_factory=list)
    aspect_ratio_style: str = ''
    missing_artwork: bool = False
    missing_bezel: bool = False
    ambiguous_bezel: bool = False
    ambiguous_overlay: bool = False
    odd_aspect_ratio: bool = False

    @property
    def has_artwork(self) -> bool:
        return self.source_name is not None

    @property
    def is_generic(self) -> bool:
        return self.artwork_name in GENERIC_ARTWORK

    @property
    def bezel_key(self) -> str:
        return join_key(ARTWORK_ROOT, self.artwork_name, f"{self.bezel_image_name}.png")


def generic_artwork_for(native_resolution: Optional[List[int]]) -> str:
    """
    Pick the generic artwork orientation.

    Unknown resolutions (vector games) and landscape screens use the
    horizontal bezel.
    """
    if not native_resolution or len(native_resolution) < 2:
        return GENERIC_HORIZONTAL
    width, height = native_resolution[0], native_resolution[1]
    return GENERIC_HORIZONTAL if width >= height else GENERIC_VERTICAL


def find_artwork_directory(game: GameRecord, repository: ContentRepository) -> Optional[str]:
    """Artwork directory name for a game: its own, else its clone parent's."""
    if repository.has_directory(join_key(ARTWORK_ROOT, game.name)):
        return game.name
    if game.clone_of and repository.has_directory(join_key(ARTWORK_ROOT, game.clone_of)):
        return game.clone_of
    return None


def _choose_bezel(candidates: List[str]) -> Tuple[Optional[str], bool]:
    """
    Choose the bezel among non-overlay image stems.

    Returns:
        Tuple of (bezel stem or None, ambiguous)
    """
    if len(candidates) == 1:
        return candidates[0], False

    named_bezel = [stem for stem in candidates if 'bezel' in stem.lower()]
    if len(named_bezel) == 1:
        return named_bezel[0], False

    if named_bezel:
        literal = [stem for stem in named_bezel if stem.lower() == 'bezel']
        if literal:
            return literal[0], False
        return None, True

    # Several images, none of them a bezel
    return None, False


def bezel_aspect_ratio(path: Path) -> Optional[Tuple[int, int]]:
    """
    Read the pixel size of a bezel image.

    Args:
        path: Image file

    Returns:
        Tuple of (width, height) or None if the image cannot be read
    """
    try:
        with Image.open(path) as img:
            return img.size
    except (OSError, UnidentifiedImageError) as e:
        logger.warning(f"Could not read bezel image {path}: {e}")
        return None


def aspect_ratio_style(size: Optional[Tuple[int, int]]) -> str:
    """CSS aspect ratio for a bezel size; empty for exact 16:9."""
    if not size:
        return ''
    width, height = size
    if width * 9 == height * 16:
        return ''
    return f"{width} / {height}"


def select_artwork(game: GameRecord, repository: ContentRepository) -> ArtworkSelection:
    """
    Select bezel and overlay artwork for a MAME game.

    Args:
        game: MAME game record
        repository: Source content repository

    Returns:
        ArtworkSelection (never raises for missing or odd artwork)
    """
    generic = generic_artwork_for(game.native_resolution)
    source_name = find_artwork_directory(game, repository)

    if source_name is None:
        logger.warning(f"Missing MAME artwork for {game.label}")
        selection = ArtworkSelection(artwork_name=generic, missing_artwork=True)
    else:
        directory = join_key(ARTWORK_ROOT, source_name)
        layouts = repository.list_names(directory, ['lay'])
        images = repository.list_names(directory, ['png'])
        stems = [Path(image).stem for image in images]

        selection = ArtworkSelection(
            artwork_name=source_name,
            source_name=source_name,
            layout_files=layouts,
            image_files=images,
        )

        overlays = [stem for stem in stems if stem.lower() == OVERLAY_IMAGE]
        if len(overlays) == 1:
            selection.overlay_image_name = overlays[0]
        elif len(overlays) > 1:
            logger.warning(f"Ambiguous overlay images for {game.label}: {', '.join(overlays)}")
            selection.ambiguous_overlay = True

        candidates = [stem for stem in stems if stem.lower() != OVERLAY_IMAGE]
        if not candidates:
            logger.warning(f"Missing MAME bezel image for {game.label}")
            selection.missing_bezel = True
            bezel = None
        else:
            bezel, ambiguous = _choose_bezel(candidates)
            if ambiguous:
                logger.warning(f"Ambiguous bezel images for {game.label}")
                selection.ambiguous_bezel = True
            elif bezel is None:
                logger.warning(f"Can't find any bezel images for {game.label}")

        if bezel is None:
            # Overlay belongs to the game's own artwork, not the generic bezel
            selection.artwork_name = generic
            selection.bezel_image_name = GENERIC_BEZEL
            selection.overlay_image_name = None
        else:
            selection.bezel_image_name = bezel

    path = repository.resolve(selection.bezel_key)
    if path is None:
        logger.warning(f"Bezel image not found: {selection.bezel_key}")
    else:
        selection.aspect_ratio_style = aspect_ratio_style(bezel_aspect_ratio(path))
        if selection.aspect_ratio_style:
            logger.debug(f"Odd bezel aspect ratio for {game.label}: {selection.aspect_ratio_style}")
            selection.odd_aspect_ratio = True

    return selection


def record_artwork_outcomes(selection: ArtworkSelection, game: GameRecord, report: AggregateReport) -> None:
    """Record artwork degradations for a game."""
    if selection.missing_artwork:
        report.record(ReportCategory.MISSING_ARTWORK, game)
    if selection.missing_bezel:
        report.record(ReportCategory.MISSING_BEZELS, game)
    if selection.ambiguous_bezel:
        report.record(ReportCategory.AMBIGUOUS_BEZELS, game)
    if selection.ambiguous_overlay:
        report.record(ReportCategory.AMBIGUOUS_OVERLAYS, game)
    if selection.odd_aspect_ratio:
        report.record(ReportCategory.ODD_BEZEL_ASPECT_RATIOS, game)
