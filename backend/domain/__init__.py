"""
Domain entities for the snake game engine.

This module contains the core game entities and rules that are independent
of infrastructure concerns (database, timers, rendering).
"""

from .constants import UP, DOWN, LEFT, RIGHT, VALID_MOVES, Direction
from .snake import Position, Snake, Food
from .game_state import GameState
from .score import ScoreRecord
from .speed import SpeedTier, SPEED_TIERS, get_tier, next_interval_ms
from .errors import SnakeGameError, InvalidTransitionError, StorageFailure

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'Direction',
    'Position', 'Snake', 'Food',
    'GameState',
    'ScoreRecord',
    'SpeedTier', 'SPEED_TIERS', 'get_tier', 'next_interval_ms',
    'SnakeGameError', 'InvalidTransitionError', 'StorageFailure',
]
