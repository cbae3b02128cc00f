"""
Tests for the score ledger implementations.

The behavioural tests run against both InMemoryScoreLedger and a real
SQLite file; the PostgreSQL path is checked with a mocked connection.
"""

import sys
import os
import sqlite3
import threading
from unittest.mock import MagicMock, patch

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data_access import InMemoryScoreLedger, ScoreRepository, get_score_ledger
from domain.errors import StorageFailure


@pytest.fixture(params=["memory", "sqlite"])
def ledger(request, tmp_path):
    if request.param == "memory":
        return InMemoryScoreLedger()
    return get_score_ledger(backend="sqlite", db_path=str(tmp_path / "scores.db"))


def fill(ledger, scores):
    for i, score in enumerate(scores):
        ledger.insert(score, f"p{i}", score // 10 + 1, "Normal", 1000 * (i + 1))


class TestEmptyLedger:
    def test_defaults(self, ledger):
        """An empty ledger answers with zeros, not None."""
        assert ledger.all() == []
        assert ledger.top_n(5) == []
        assert ledger.highest_score() == 0
        assert ledger.total_games() == 0
        assert ledger.average_score() == 0.0

    @pytest.mark.parametrize("score", [0, 1, 999, -5])
    def test_rank_is_one(self, ledger, score):
        assert ledger.rank(score) == 1

    def test_stats(self, ledger):
        stats = ledger.stats()

        assert stats.highest_score == 0
        assert stats.total_games == 0
        assert stats.average_score == 0.0


class TestLeaderboardQueries:
    """Ledger holding [50, 80, 80, 30]."""

    @pytest.fixture(autouse=True)
    def _fill(self, ledger):
        fill(ledger, [50, 80, 80, 30])

    def test_rank(self, ledger):
        assert ledger.rank(80) == 1
        assert ledger.rank(50) == 3
        assert ledger.rank(10) == 5
        assert ledger.rank(100) == 1

    def test_top_n_keeps_insertion_order_for_ties(self, ledger):
        top = ledger.top_n(2)

        assert [r.score for r in top] == [80, 80]
        assert [r.player_name for r in top] == ["p1", "p2"]
        assert top[0].id < top[1].id

    def test_all_is_fully_ordered(self, ledger):
        assert [r.score for r in ledger.all()] == [80, 80, 50, 30]

    def test_top_n_larger_than_ledger(self, ledger):
        assert len(ledger.top_n(50)) == 4

    def test_top_n_zero(self, ledger):
        assert ledger.top_n(0) == []

    def test_aggregates(self, ledger):
        assert ledger.average_score() == pytest.approx(60.0)
        assert ledger.highest_score() == 80
        assert ledger.total_games() == 4

    def test_stats_matches_individual_queries(self, ledger):
        stats = ledger.stats()

        assert stats.highest_score == 80
        assert stats.total_games == 4
        assert stats.average_score == pytest.approx(60.0)

    def test_scores_at_or_above(self, ledger):
        assert [r.score for r in ledger.scores_at_or_above(50)] == [80, 80, 50]

    def test_clear(self, ledger):
        assert ledger.clear() == 4

        assert ledger.all() == []
        assert ledger.rank(80) == 1
        assert ledger.highest_score() == 0


class TestInsert:
    def test_round_trip(self, ledger):
        """Everything but id and timestamp comes back as inserted."""
        inserted = ledger.insert(42, "Alice", 13, "Expert", 65_000)

        stored = ledger.all()

        assert len(stored) == 1
        record = stored[0]
        assert record == inserted
        assert (record.score, record.player_name, record.snake_length,
                record.speed_tier, record.duration_ms) == (42, "Alice", 13, "Expert", 65_000)
        assert record.id > 0
        assert record.timestamp_ms > 0

    def test_player_name_truncated(self, ledger):
        record = ledger.insert(5, "Bartholomew the Great", 6, "Normal", 1)

        assert record.player_name == "Bartholome"
        assert ledger.all()[0].player_name == "Bartholome"

    def test_ids_increase(self, ledger):
        first = ledger.insert(1, "a", 2, "Normal", 1)
        second = ledger.insert(1, "b", 2, "Normal", 1)

        assert second.id > first.id

    def test_read_after_write_from_threads(self, ledger):
        """Inserts completed on other threads are visible to later queries."""
        threads = [
            threading.Thread(target=ledger.insert, args=(i, f"t{i}", 1, "Normal", 10))
            for i in range(1, 9)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert ledger.total_games() == 8
        assert ledger.highest_score() == 8
        assert ledger.rank(8) == 1


class TestSqliteFailures:
    def test_unwritable_path_raises_storage_failure(self, tmp_path):
        repo = ScoreRepository(backend="sqlite", db_path=str(tmp_path / "missing" / "dir" / "x.db"))

        with pytest.raises(StorageFailure):
            repo.init_schema()

    def test_query_without_schema_raises_storage_failure(self, tmp_path):
        repo = ScoreRepository(backend="sqlite", db_path=str(tmp_path / "empty.db"))

        with pytest.raises(StorageFailure) as excinfo:
            repo.highest_score()
        assert isinstance(excinfo.value.__cause__, sqlite3.Error)

    def test_schema_version_recorded_once(self, tmp_path):
        path = str(tmp_path / "scores.db")
        get_score_ledger(backend="sqlite", db_path=path)
        get_score_ledger(backend="sqlite", db_path=path)

        conn = sqlite3.connect(path)
        try:
            rows = conn.execute("SELECT version FROM schema_version").fetchall()
        finally:
            conn.close()
        assert rows == [(1,)]


class TestPostgresRepository:
    """PostgreSQL path, with the connection mocked out."""

    @patch('database_postgres.get_connection')
    def test_insert_uses_returning_and_percent_placeholders(self, mock_get_conn):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = {'id': 17}
        mock_conn = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_get_conn.return_value = mock_conn

        repo = ScoreRepository(backend="postgres")
        record = repo.insert(12, "PgPlayer", 4, "Normal", 3000)

        query, params = mock_cursor.execute.call_args[0]
        assert "RETURNING id" in query
        assert "%s" in query and "?" not in query
        assert params[:4] == (12, "PgPlayer", 4, "Normal")
        assert record.id == 17
        mock_conn.commit.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('database_postgres.get_connection')
    def test_rank_query(self, mock_get_conn):
        mock_cursor = MagicMock()
        mock_cursor.fetchone.return_value = {'value': 3}
        mock_conn = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_get_conn.return_value = mock_conn

        repo = ScoreRepository(backend="postgres")

        assert repo.rank(55) == 3
        query, params = mock_cursor.execute.call_args[0]
        assert "score > %s" in query
        assert params == (55,)
        mock_conn.commit.assert_not_called()

    @patch('database_postgres.get_connection')
    def test_driver_error_becomes_storage_failure(self, mock_get_conn):
        import psycopg2

        mock_cursor = MagicMock()
        mock_cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")
        mock_conn = MagicMock()
        mock_conn.cursor.return_value = mock_cursor
        mock_get_conn.return_value = mock_conn

        repo = ScoreRepository(backend="postgres")

        with pytest.raises(StorageFailure, match="server closed"):
            repo.total_games()
        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()
