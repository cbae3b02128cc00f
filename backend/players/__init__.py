"""
Player implementations for headless sessions.

Provides:
- Player: Base class for all players
- AutopilotPlayer: Greedy food-seeking player that avoids walls and itself
"""

from .base import Player
from .autopilot import AutopilotPlayer

__all__ = ['Player', 'AutopilotPlayer']
