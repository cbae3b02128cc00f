"""
Autopilot player - heads for the food while avoiding walls and its own body.
"""

import random
from typing import List, Optional

from domain.constants import Direction, VALID_MOVES
from domain.game_state import GameState
from domain.snake import Position
from .base import Player


class AutopilotPlayer(Player):
    """
    Picks a safe direction, preferring ones that shorten the distance to food.

    Safe means the next head stays on the board and off the body. The tail
    cell counts as blocked because collisions are checked against the
    pre-move body.
    """

    name = "Autopilot"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def safe_moves(self, game_state: GameState) -> List[Direction]:
        snake = game_state.snake
        moves: List[Direction] = []
        for move in VALID_MOVES:
            if move == snake.direction.opposite and snake.body:
                continue
            new_head = snake.head.moved(move)
            if not game_state.in_bounds(new_head):
                continue
            if new_head in snake.body:
                continue
            moves.append(move)
        return moves

    def get_move(self, game_state: GameState) -> Direction:
        valid_moves = self.safe_moves(game_state)

        # No safe moves: keep going (we'll die anyway)
        if not valid_moves:
            return game_state.snake.direction

        food = game_state.food.position

        def distance(move: Direction) -> int:
            head: Position = game_state.snake.head.moved(move)
            return abs(head.x - food.x) + abs(head.y - food.y)

        best = min(distance(move) for move in valid_moves)
        return self.rng.choice(sorted(
            (m for m in valid_moves if distance(m) == best),
            key=lambda m: m.value
        ))
