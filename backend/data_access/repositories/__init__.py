"""
Repository pattern implementations for data access.

This module provides a clean abstraction over database operations
with proper connection management and error handling.
"""

from .base import BaseRepository
from .score_repository import ScoreRepository

__all__ = ['BaseRepository', 'ScoreRepository']
