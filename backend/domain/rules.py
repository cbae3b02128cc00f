"""
Pure transition functions for the single-player snake game.

Every function takes a GameState and returns a GameState. Inputs are never
mutated; callers that see the same object back know nothing changed.
"""

import logging
import random
from dataclasses import replace
from typing import Optional, Set

from .constants import (
    DEATH_BOARD_FULL,
    DEATH_SELF,
    DEATH_WALL,
    Direction,
    RIGHT,
)
from .game_state import GameState
from .snake import Food, Position, Snake

logger = logging.getLogger(__name__)


def initialize(width: int, height: int, rng: Optional[random.Random] = None) -> GameState:
    """
    Create a fresh game: a one-cell snake at the board centre heading right,
    with food on a random free cell.
    """
    snake = Snake(head=Position(width // 2, height // 2), body=(), direction=RIGHT)
    food_position = spawn_food(snake, width, height, rng)
    if food_position is None:
        # A 1x1 board has no room for food; the game is over before it starts.
        return GameState(
            snake=snake,
            food=Food(snake.head),
            width=width,
            height=height,
            terminal=True,
            won=True,
            death_reason=DEATH_BOARD_FULL,
        )
    return GameState(snake=snake, food=Food(food_position), width=width, height=height)


def spawn_food(
    snake: Snake,
    width: int,
    height: int,
    rng: Optional[random.Random] = None
) -> Optional[Position]:
    """
    Return a random cell not occupied by the snake, or None if the board is full.
    Samples until a free cell is hit, so it always terminates once a free
    cell is known to exist.
    """
    rng = rng or random
    occupied: Set[Position] = set(snake.cells)
    if len(occupied) >= width * height:
        return None

    while True:
        candidate = Position(rng.randrange(width), rng.randrange(height))
        if candidate not in occupied:
            return candidate


def advance(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    """
    Move the snake one cell in its current direction.

    Returns the same state when the game is terminal or paused. A collision
    with a wall or with the pre-move body ends the game and leaves every
    other field untouched.
    """
    if state.terminal or state.paused:
        return state

    snake = state.snake
    new_head = snake.head.moved(snake.direction)

    if not state.in_bounds(new_head):
        return replace(state, terminal=True, death_reason=DEATH_WALL)
    if new_head in snake.body:
        return replace(state, terminal=True, death_reason=DEATH_SELF)

    if new_head == state.food.position:
        grown = Snake(head=new_head, body=snake.body + (snake.head,), direction=snake.direction)
        score = state.score + 1
        food_position = spawn_food(grown, state.width, state.height, rng)
        if food_position is None:
            logger.info("Board filled at score %s", score)
            return replace(
                state,
                snake=grown,
                score=score,
                terminal=True,
                won=True,
                death_reason=DEATH_BOARD_FULL,
            )
        return replace(state, snake=grown, food=Food(food_position), score=score)

    # Constant length: the oldest segment leaves as the old head joins.
    body = (snake.body + (snake.head,))[1:]
    moved = Snake(head=new_head, body=body, direction=snake.direction)
    return replace(state, snake=moved)


def change_direction(state: GameState, requested: Direction) -> GameState:
    """
    Point the snake in a new direction.

    Reversing straight back into the neck is rejected, as is any turn after
    the game has ended. Paused games still accept turns.
    """
    current = state.snake.direction
    if state.terminal or requested == current or requested == current.opposite:
        return state
    return replace(state, snake=state.snake.turned(requested))
