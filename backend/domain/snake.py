"""
Snake and food entities for the game engine.
"""

from dataclasses import dataclass, replace
from typing import NamedTuple, Tuple

from .constants import Direction, RIGHT


class Position(NamedTuple):
    """A board cell. Equality is by coordinates."""

    x: int
    y: int

    def moved(self, direction: Direction) -> "Position":
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Snake:
    """
    Represents the snake on the board.

    Attributes:
        head: current head position
        body: segments from tail (index 0) to neck (last); head excluded
        direction: direction the next tick moves in
    """

    head: Position
    body: Tuple[Position, ...] = ()
    direction: Direction = RIGHT

    @property
    def length(self) -> int:
        """Total length including the head."""
        return len(self.body) + 1

    @property
    def cells(self) -> Tuple[Position, ...]:
        """Every occupied cell, tail first, head last."""
        return self.body + (self.head,)

    def occupies(self, position: Position) -> bool:
        return position == self.head or position in self.body

    def turned(self, direction: Direction) -> "Snake":
        return replace(self, direction=direction)


@dataclass(frozen=True)
class Food:
    position: Position
