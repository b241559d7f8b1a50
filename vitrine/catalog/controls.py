"""Control metadata normalization."""

import logging
from typing import List

from .game_record import GameRecord

logger = logging.getLogger(__name__)

# Control types where the first two buttons may act as joystick directions
BUTTON_ONLY_TYPES = ('only_buttons', 'pedal')  # pedal: Lunar Lander

DIRECTION_PAIRS = (
    ('left', 'right'),
    ('up', 'down'),
)


def _label_words(label: str) -> List[str]:
    return label.lower().split(' ')


def normalize_button_directions(game: GameRecord) -> bool:
    """
    Treat leading direction buttons as a two-way joystick.

    A handful of games (e.g. Asteroids, Lunar Lander) expose rotation or
    movement as buttons. When player 1 has button-only controls and the first
    two labels read left/right or up/down, those labels are dropped and the
    player 1 controls become a two-way direction control.

    Args:
        game: Game record (modified in place)

    Returns:
        True if the controls were rewritten
    """
    if not game.controls or not game.button_labels:
        return False

    labels = game.button_labels
    player1 = game.controls.get('1') or game.controls.get(1)

    if not player1 or len(labels) < 2 or player1.get('type') not in BUTTON_ONLY_TYPES:
        return False

    first, second = _label_words(labels[0]), _label_words(labels[1])

    for forward, backward in DIRECTION_PAIRS:
        if forward in first and backward in second:
            game.button_labels = labels[2:]
            player1['ways'] = 2
            player1['buttons'] = player1['numberOfButtons'] = len(labels)
            player1['directions'] = [forward, backward]
            logger.debug(f"Mapped {forward}/{backward} buttons to directions for {game.label}")
            return True

    return False
