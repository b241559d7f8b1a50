"""Machine-specific MAME facts and emulator binary naming."""

from typing import Tuple

from ..catalog.game_record import GameRecord

# No binary for these machines exists on the external host (or anywhere?);
# they are skipped when their binary is missing locally.
UNDISCOVERED_ASSEMBLIES: Tuple[str, ...] = (
    'ace', 'carpolo', 'clayshoo', 'cybsled', 'ddrdismx', 'ddrstraw', 'primrage', 'tmek',
)

# Clones whose binary is named after the parent rather than the parent system
PARENT_BINARY_CLONES: Tuple[str, ...] = ('gradius', 'crimfghtu', 'cyberbalt')

# Space Invaders rotates its display with a mirror, so canonical and catalog
# resolutions legitimately differ by a width/height swap.
MIRROR_ROTATION_MACHINE = 'invaders'


def binary_id_for(game: GameRecord) -> str:
    """
    Compute the emulator binary id (driver) for a MAME game.

    Parents and clones sharing their parent's system use their own machine
    id; others use the parent system (e.g. every neogeo game shares
    'neogeo').
    """
    if game.name in PARENT_BINARY_CLONES and game.clone_of:
        return game.clone_of

    if game.parent_system == game.clone_of or not game.parent_system:
        return game.name

    return game.parent_system


def wasm_filename(binary_id: str) -> str:
    return f"mame{binary_id}.wasm.gz"


def wasmjs_filename(binary_id: str) -> str:
    return f"mame{binary_id}.js.gz"


def wasm_program_key(binary_id: str) -> str:
    """Conventional file-location key of the primary binary."""
    return f"mame{binary_id}.wasm"
