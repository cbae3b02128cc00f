"""
Game constants for the snake core.
"""

from enum import Enum
from typing import Dict, Tuple


class Direction(str, Enum):
    """Movement directions. Screen coordinates: UP decreases y."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def opposite(self) -> "Direction":
        return OPPOSITES[self]

    @property
    def delta(self) -> Tuple[int, int]:
        return DELTAS[self]


UP = Direction.UP
DOWN = Direction.DOWN
LEFT = Direction.LEFT
RIGHT = Direction.RIGHT
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

OPPOSITES: Dict[Direction, Direction] = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

DELTAS: Dict[Direction, Tuple[int, int]] = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

# Session loop settings
PAUSED_POLL_MS = 100
MAX_PLAYER_NAME_LENGTH = 10

# Death reasons recorded on terminal states
DEATH_WALL = "wall"
DEATH_SELF = "self"
DEATH_BOARD_FULL = "board_full"
