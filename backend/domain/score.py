"""
ScoreRecord entity - one completed game in the ledger.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class ScoreRecord:
    """
    A finished game as stored in the ledger.

    Attributes:
        id: identifier assigned by the store
        score: final score
        player_name: at most 10 characters
        snake_length: final length including the head
        speed_tier: label of the speed tier the game was played on
        duration_ms: wall-clock length of the game
        timestamp_ms: creation time in epoch milliseconds
    """

    id: int
    score: int
    player_name: str
    snake_length: int
    speed_tier: str
    duration_ms: int
    timestamp_ms: int

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ScoreRecord":
        """Build a record from a database row keyed by column name."""
        return cls(
            id=int(row['id']),
            score=int(row['score']),
            player_name=row['player_name'],
            snake_length=int(row['snake_length']),
            speed_tier=row['game_speed_level'],
            duration_ms=int(row['game_duration_ms']),
            timestamp_ms=int(row['timestamp']),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'score': self.score,
            'player_name': self.player_name,
            'snake_length': self.snake_length,
            'speed_tier': self.speed_tier,
            'duration_ms': self.duration_ms,
            'timestamp_ms': self.timestamp_ms,
        }

    @property
    def formatted_date(self) -> str:
        return datetime.fromtimestamp(self.timestamp_ms / 1000).strftime("%b %d, %Y")

    @property
    def formatted_time(self) -> str:
        return datetime.fromtimestamp(self.timestamp_ms / 1000).strftime("%H:%M")

    @property
    def formatted_duration(self) -> str:
        """Duration as '1m 5s', or just '42s' under a minute."""
        seconds = self.duration_ms // 1000
        minutes, remaining = divmod(seconds, 60)
        if minutes > 0:
            return f"{minutes}m {remaining}s"
        return f"{remaining}s"

    def relative_time(self, now_ms: int) -> str:
        diff = now_ms - self.timestamp_ms
        if diff < 60_000:
            return "Just now"
        if diff < 3_600_000:
            return f"{diff // 60_000}m ago"
        if diff < 86_400_000:
            return f"{diff // 3_600_000}h ago"
        if diff < 604_800_000:
            return f"{diff // 86_400_000}d ago"
        return self.formatted_date
