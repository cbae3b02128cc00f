"""
ScoreLedger interface and an in-memory implementation.

The game loop only depends on ScoreLedger, so sessions can be exercised
against InMemoryScoreLedger without a database.
"""

import threading
import time
from dataclasses import dataclass
from typing import List

from domain.constants import MAX_PLAYER_NAME_LENGTH
from domain.score import ScoreRecord


@dataclass(frozen=True)
class LeaderboardStats:
    highest_score: int = 0
    total_games: int = 0
    average_score: float = 0.0


class ScoreLedger:
    """
    Base class/interface for score storage.

    Orderings are by score descending, ties by insertion order. Queries on an
    empty ledger return 0 / 0.0 / rank 1 rather than None.
    """

    def insert(
        self,
        score: int,
        player_name: str,
        snake_length: int,
        tier_label: str,
        duration_ms: int
    ) -> ScoreRecord:
        raise NotImplementedError

    def top_n(self, n: int) -> List[ScoreRecord]:
        raise NotImplementedError

    def all(self) -> List[ScoreRecord]:
        raise NotImplementedError

    def scores_at_or_above(self, score: int) -> List[ScoreRecord]:
        raise NotImplementedError

    def highest_score(self) -> int:
        raise NotImplementedError

    def total_games(self) -> int:
        raise NotImplementedError

    def average_score(self) -> float:
        raise NotImplementedError

    def rank(self, score: int) -> int:
        """1 + number of records with a strictly greater score."""
        raise NotImplementedError

    def clear(self) -> int:
        """Delete every record. Returns how many were removed."""
        raise NotImplementedError

    def stats(self) -> LeaderboardStats:
        return LeaderboardStats(
            highest_score=self.highest_score(),
            total_games=self.total_games(),
            average_score=self.average_score(),
        )


class InMemoryScoreLedger(ScoreLedger):
    """Lock-guarded, process-local ledger. Nothing survives the process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: List[ScoreRecord] = []
        self._next_id = 1

    def insert(self, score, player_name, snake_length, tier_label, duration_ms) -> ScoreRecord:
        with self._lock:
            record = ScoreRecord(
                id=self._next_id,
                score=score,
                player_name=player_name[:MAX_PLAYER_NAME_LENGTH],
                snake_length=snake_length,
                speed_tier=tier_label,
                duration_ms=duration_ms,
                timestamp_ms=int(time.time() * 1000),
            )
            self._next_id += 1
            self._records.append(record)
            return record

    def _ordered(self) -> List[ScoreRecord]:
        with self._lock:
            return sorted(self._records, key=lambda r: (-r.score, r.id))

    def top_n(self, n: int) -> List[ScoreRecord]:
        if n <= 0:
            return []
        return self._ordered()[:n]

    def all(self) -> List[ScoreRecord]:
        return self._ordered()

    def scores_at_or_above(self, score: int) -> List[ScoreRecord]:
        return [r for r in self._ordered() if r.score >= score]

    def highest_score(self) -> int:
        with self._lock:
            return max((r.score for r in self._records), default=0)

    def total_games(self) -> int:
        with self._lock:
            return len(self._records)

    def average_score(self) -> float:
        with self._lock:
            if not self._records:
                return 0.0
            return sum(r.score for r in self._records) / len(self._records)

    def rank(self, score: int) -> int:
        with self._lock:
            return 1 + sum(1 for r in self._records if r.score > score)

    def clear(self) -> int:
        with self._lock:
            removed = len(self._records)
            self._records.clear()
            return removed
