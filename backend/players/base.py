"""
Base player interface for headless sessions.
"""

from domain.constants import Direction
from domain.game_state import GameState


class Player:
    """
    Base class/interface for player logic.

    A player looks at the current snapshot and returns the direction it
    wants the snake to take next. The session decides whether the turn is
    accepted.
    """

    name = "Player"

    def get_move(self, game_state: GameState) -> Direction:
        """
        Return a move direction given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            One of Direction.UP, DOWN, LEFT or RIGHT
        """
        raise NotImplementedError
