"""
GameState entity - an immutable snapshot of the game at a point in time.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .snake import Food, Position, Snake


@dataclass(frozen=True)
class GameState:
    """
    A snapshot of a single-player game.

    Attributes:
        snake: the snake (head, body, direction)
        food: the single food item on the board
        width, height: board dimensions
        score: number of food items eaten
        terminal: True once the game has ended
        paused: True while the session is paused
        won: True when the snake filled the board
        death_reason: 'wall', 'self', 'board_full' or None
    """

    snake: Snake
    food: Food
    width: int
    height: int
    score: int = 0
    terminal: bool = False
    paused: bool = False
    won: bool = False
    death_reason: Optional[str] = None

    @property
    def snake_length(self) -> int:
        return self.snake.length

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def with_paused(self, paused: bool) -> "GameState":
        if paused == self.paused:
            return self
        return replace(self, paused=paused)

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        o = snake body
        H = snake head (X once the game is lost)
        Row 0 is printed first, matching screen coordinates.
        """
        board = [['.' for _ in range(self.width)] for _ in range(self.height)]

        fx, fy = self.food.position
        if self.in_bounds(self.food.position):
            board[fy][fx] = 'F'

        for x, y in self.snake.body:
            board[y][x] = 'o'

        hx, hy = self.snake.head
        if self.in_bounds(self.snake.head):
            board[hy][hx] = 'X' if self.terminal and not self.won else 'H'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(self.height)]
        result.append("   " + " ".join(str(i % 10) for i in range(self.width)))
        return "\n".join(result)

    def __repr__(self):
        return (
            f"<GameState head={tuple(self.snake.head)}, length={self.snake_length}, "
            f"food={tuple(self.food.position)}, score={self.score}, "
            f"terminal={self.terminal}, paused={self.paused}>"
        )
