"""
Data access layer for the score ledger.

get_score_ledger() returns the configured durable ledger with its schema
initialized; InMemoryScoreLedger is available for runs that should not
persist anything.
"""

import logging
from typing import Optional

from .ledger import InMemoryScoreLedger, LeaderboardStats, ScoreLedger
from .repositories import ScoreRepository

logger = logging.getLogger(__name__)


def get_score_ledger(backend: Optional[str] = None, db_path: Optional[str] = None) -> ScoreRepository:
    """
    Build the durable score ledger and make sure its schema exists.

    Args:
        backend: 'sqlite' or 'postgres'; defaults to environment detection
        db_path: SQLite file path override

    Raises:
        StorageFailure: If the schema cannot be created
    """
    repo = ScoreRepository(backend=backend, db_path=db_path)
    repo.init_schema()
    logger.debug("Score ledger ready (backend=%s)", repo.backend)
    return repo


__all__ = [
    'ScoreLedger',
    'InMemoryScoreLedger',
    'LeaderboardStats',
    'ScoreRepository',
    'get_score_ledger',
]
