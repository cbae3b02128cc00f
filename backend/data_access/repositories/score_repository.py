"""
Score repository - the durable ScoreLedger backed by SQLite or PostgreSQL.
"""

import logging
import time
from typing import List, Optional

import database
from domain.constants import MAX_PLAYER_NAME_LENGTH
from domain.score import ScoreRecord
from ..ledger import LeaderboardStats, ScoreLedger
from .base import BaseRepository

logger = logging.getLogger(__name__)

SCORE_COLUMNS = """
    id, score, player_name, snake_length, game_speed_level,
    timestamp, game_duration_ms
"""

# Highest score first; equal scores keep insertion order.
LEADERBOARD_ORDER = "ORDER BY score DESC, id ASC"


class ScoreRepository(BaseRepository, ScoreLedger):
    """
    Repository for the scores table.

    Every method runs in its own transaction and commits before returning,
    so a query issued after an insert returns always sees that insert.
    """

    def insert(
        self,
        score: int,
        player_name: str,
        snake_length: int,
        tier_label: str,
        duration_ms: int
    ) -> ScoreRecord:
        """
        Insert a completed game.

        Args:
            score: Final score
            player_name: Player name, truncated to 10 characters
            snake_length: Final snake length including the head
            tier_label: Speed tier label (e.g. 'Normal')
            duration_ms: Wall-clock game duration in milliseconds

        Returns:
            The stored record with its assigned id and timestamp
        """
        name = player_name[:MAX_PLAYER_NAME_LENGTH]
        timestamp_ms = int(time.time() * 1000)
        params = (score, name, snake_length, tier_label, timestamp_ms, duration_ms)

        with self.connection() as (conn, cursor):
            query = """
                INSERT INTO scores (
                    score, player_name, snake_length, game_speed_level,
                    timestamp, game_duration_ms
                ) VALUES (%s, %s, %s, %s, %s, %s)
            """
            if self.backend == database.POSTGRES:
                cursor.execute(query + " RETURNING id", params)
                record_id = cursor.fetchone()['id']
            else:
                cursor.execute(self.sql(query), params)
                record_id = cursor.lastrowid

        logger.info("Saved score %s for %s (id=%s)", score, name, record_id)
        return ScoreRecord(
            id=int(record_id),
            score=score,
            player_name=name,
            snake_length=snake_length,
            speed_tier=tier_label,
            duration_ms=duration_ms,
            timestamp_ms=timestamp_ms,
        )

    def _select(self, where: str = "", params: tuple = (), limit: Optional[int] = None) -> List[ScoreRecord]:
        query = f"SELECT {SCORE_COLUMNS} FROM scores {where} {LEADERBOARD_ORDER}"
        if limit is not None:
            query += " LIMIT %s"
            params = params + (limit,)

        with self.read_connection() as (conn, cursor):
            cursor.execute(self.sql(query), params)
            rows = cursor.fetchall()

        return [ScoreRecord.from_row(dict(row)) for row in rows]

    def _scalar(self, query: str, params: tuple = ()):
        with self.read_connection() as (conn, cursor):
            cursor.execute(self.sql(query), params)
            row = cursor.fetchone()
        return dict(row)['value']

    def top_n(self, n: int) -> List[ScoreRecord]:
        if n <= 0:
            return []
        return self._select(limit=n)

    def all(self) -> List[ScoreRecord]:
        return self._select()

    def scores_at_or_above(self, score: int) -> List[ScoreRecord]:
        return self._select("WHERE score >= %s", (score,))

    def highest_score(self) -> int:
        return int(self._scalar("SELECT COALESCE(MAX(score), 0) AS value FROM scores"))

    def total_games(self) -> int:
        return int(self._scalar("SELECT COUNT(*) AS value FROM scores"))

    def average_score(self) -> float:
        return float(self._scalar("SELECT COALESCE(AVG(score), 0.0) AS value FROM scores"))

    def rank(self, score: int) -> int:
        return int(self._scalar(
            "SELECT COUNT(*) + 1 AS value FROM scores WHERE score > %s", (score,)
        ))

    def stats(self) -> LeaderboardStats:
        """Highest, count and average in a single read."""
        query = """
            SELECT
                COALESCE(MAX(score), 0) AS highest,
                COUNT(*) AS total,
                COALESCE(AVG(score), 0.0) AS average
            FROM scores
        """
        with self.read_connection() as (conn, cursor):
            cursor.execute(self.sql(query))
            row = dict(cursor.fetchone())

        return LeaderboardStats(
            highest_score=int(row['highest']),
            total_games=int(row['total']),
            average_score=float(row['average']),
        )

    def clear(self) -> int:
        with self.connection() as (conn, cursor):
            cursor.execute(self.sql("DELETE FROM scores"))
            deleted = cursor.rowcount or 0

        logger.warning("Cleared %s score records", deleted)
        return deleted
