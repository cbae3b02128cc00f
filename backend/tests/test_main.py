"""
Tests for main.py - the headless console driver - and the autopilot player.
"""

import argparse
import random
import sys
import os

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from config import GameSettings
from data_access import InMemoryScoreLedger
from domain.constants import DOWN, LEFT, RIGHT, UP, MAX_PLAYER_NAME_LENGTH
from domain.game_state import GameState
from domain.snake import Food, Position, Snake
from players import AutopilotPlayer
from services.game_loop import GameLoop, ManualTimerFactory


def make_state(head, body=(), direction=RIGHT, food=(0, 0), width=6, height=6):
    return GameState(
        snake=Snake(Position(*head), tuple(Position(*p) for p in body), direction),
        food=Food(Position(*food)),
        width=width,
        height=height,
    )


class TestAutopilotPlayer:
    def test_avoids_walls(self):
        state = make_state(head=(0, 0), direction=UP, food=(5, 5))

        moves = AutopilotPlayer(random.Random(0)).safe_moves(state)

        assert set(moves) == {DOWN, RIGHT}

    def test_avoids_body(self):
        state = make_state(head=(2, 2), body=[(2, 3), (3, 3), (3, 2)], direction=LEFT, food=(5, 5))

        moves = AutopilotPlayer().safe_moves(state)

        assert set(moves) == {UP, LEFT}

    def test_heads_for_food(self):
        state = make_state(head=(2, 2), direction=RIGHT, food=(2, 0))

        assert AutopilotPlayer(random.Random(1)).get_move(state) == UP

    def test_trapped_snake_keeps_direction(self):
        state = make_state(
            head=(0, 0), body=[(1, 0), (1, 1), (0, 1)], direction=UP, food=(5, 5)
        )

        assert AutopilotPlayer().get_move(state) == UP


class TestRunFast:
    def test_session_finishes_and_is_recorded(self):
        ledger = InMemoryScoreLedger()
        timers = ManualTimerFactory()
        clock = main.VirtualClock()
        settings = GameSettings(board_width=8, board_height=8, player_name="Bot")
        loop = GameLoop(ledger, settings, timer_factory=timers, clock_ms=clock, rng=random.Random(5))

        result = main.run_fast(loop, timers, clock, AutopilotPlayer(random.Random(5)), 10_000, False)

        assert result is not None
        assert loop.state.terminal is True
        assert clock.now_ms > 0
        assert result.duration_ms == clock.now_ms
        if result.score > 0:
            assert ledger.all()[0].score == result.score
            assert ledger.all()[0].player_name == "Bot"
        else:
            assert ledger.total_games() == 0

    def test_tick_budget_exhausted_returns_none(self):
        timers = ManualTimerFactory()
        clock = main.VirtualClock()
        loop = GameLoop(InMemoryScoreLedger(), GameSettings(board_width=30, board_height=30),
                        timer_factory=timers, clock_ms=clock, rng=random.Random(2))

        result = main.run_fast(loop, timers, clock, AutopilotPlayer(random.Random(2)), 1, False)

        assert result is None
        assert timers.pending is None

    def test_single_cell_board_returns_won_result(self):
        timers = ManualTimerFactory()
        clock = main.VirtualClock()
        loop = GameLoop(InMemoryScoreLedger(), GameSettings(board_width=1, board_height=1),
                        timer_factory=timers, clock_ms=clock)

        result = main.run_fast(loop, timers, clock, AutopilotPlayer(random.Random(1)), 10, False)

        assert result is not None
        assert result.won is True
        assert result.score == 0
        assert timers.pending is None


class TestMain:
    def test_main_prints_result(self, capsys, monkeypatch):
        monkeypatch.delenv('DATABASE_URL', raising=False)

        exit_code = main.main(["--no-persist", "--seed", "3", "--width", "8", "--height", "8"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Score:" in out

    def test_main_persists_to_sqlite(self, capsys, monkeypatch, tmp_path):
        monkeypatch.delenv('DATABASE_URL', raising=False)
        monkeypatch.delenv('PGHOST', raising=False)
        monkeypatch.setenv('SNAKE_DB_PATH', str(tmp_path / "scores.db"))

        exit_code = main.main(["--seed", "11", "--width", "8", "--height", "8", "--player-name", "Robo"])

        assert exit_code == 0
        assert (tmp_path / "scores.db").exists()

    def test_report_handles_unsaved_result(self, capsys):
        result = main.SessionResult(
            score=5, snake_length=6, tier_label="Normal", player_name="x",
            duration_ms=10, persisted=False, error="disk full",
        )

        main.report(result, InMemoryScoreLedger())

        assert "not saved: disk full" in capsys.readouterr().out

    def test_build_settings_truncates_player_name(self, monkeypatch):
        monkeypatch.delenv('SNAKE_PLAYER_NAME', raising=False)
        args = argparse.Namespace(
            board_size=None, width=None, height=None, tier=None,
            player_name="AVeryLongPlayerName",
        )

        settings = main.build_settings(args)

        assert settings.player_name == "AVeryLongPlayerName"[:MAX_PLAYER_NAME_LENGTH]
        assert len(settings.player_name) == MAX_PLAYER_NAME_LENGTH
