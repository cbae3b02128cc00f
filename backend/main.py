"""
Headless console driver for the snake core.

Runs one session with the autopilot at the controls, records the result in
the score ledger and prints where it ranks.

Usage:
    python backend/main.py [--board-size SMALL] [--tier Expert] [--show-board]
    python backend/main.py --realtime --show-board
"""

import argparse
import logging
import random
import sys
import threading
from typing import Optional

from config import BoardSize, configure_logging, load_settings, GameSettings
from data_access import InMemoryScoreLedger, ScoreLedger, get_score_ledger
from domain.constants import MAX_PLAYER_NAME_LENGTH
from domain.errors import StorageFailure
from domain.game_state import GameState
from domain.speed import get_tier
from players import AutopilotPlayer, Player
from services.game_loop import GameLoop, ManualTimerFactory, SessionResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_TICKS = 5000


class VirtualClock:
    def __init__(self):
        self.now_ms = 0

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, delta_ms: int) -> None:
        self.now_ms += delta_ms


def build_settings(args: argparse.Namespace) -> GameSettings:
    settings = load_settings()
    width, height = settings.board_width, settings.board_height
    if args.board_size:
        size = BoardSize[args.board_size.upper()]
        width, height = size.width, size.height
    return GameSettings(
        board_width=args.width or width,
        board_height=args.height or height,
        speed_tier=get_tier(args.tier) if args.tier else settings.speed_tier,
        control_sensitivity=settings.control_sensitivity,
        player_name=(args.player_name or settings.player_name)[:MAX_PLAYER_NAME_LENGTH],
        log_level=settings.log_level,
    )


def run_fast(
    loop: GameLoop,
    timers: ManualTimerFactory,
    clock: VirtualClock,
    player: Player,
    max_ticks: int,
    show_board: bool
) -> Optional[SessionResult]:
    """
    Drive the loop as fast as possible on a virtual clock.

    The loop must have been built with the given timers and clock; each
    iteration lets the player steer, then fires the pending tick.
    """
    loop.start()
    for _ in range(max_ticks):
        state = loop.state
        if state.terminal:
            break
        loop.change_direction(player.get_move(state))
        timer = timers.pending
        if timer is None:
            break
        clock.advance(timer.delay_ms)
        timer.fire()
        if show_board:
            print(loop.state.print_board())
            print(f"Score: {loop.state.score}\n")
    else:
        if not loop.state.terminal:
            logger.warning("Stopped after %s ticks without a game over", max_ticks)
            loop.stop()
            return None

    return loop.last_result


def run_realtime(loop: GameLoop, player: Player, show_board: bool) -> SessionResult:
    """Run on real timers; the autopilot steers from the tick listener."""
    finished = threading.Event()
    results = []

    def on_tick(state: GameState) -> None:
        if show_board:
            print(state.print_board())
            print(f"Score: {state.score}\n")
        if not state.terminal:
            loop.change_direction(player.get_move(state))

    def on_ended(result: SessionResult) -> None:
        results.append(result)
        finished.set()

    loop.add_tick_listener(on_tick)
    loop.add_session_ended_listener(on_ended)
    loop.start()
    try:
        finished.wait()
    finally:
        loop.stop()
    return results[0]


def report(result: Optional[SessionResult], ledger: ScoreLedger) -> None:
    if result is None:
        print("No result recorded.")
        return

    outcome = "Board cleared!" if result.won else f"Game over ({result.death_reason})"
    print(outcome)
    print(f"Score: {result.score}  Length: {result.snake_length}  Tier: {result.tier_label}")

    if result.score <= 0:
        print("Zero scores are not recorded.")
        return
    if not result.persisted:
        print(f"Warning: score was not saved: {result.error}")
        return

    try:
        rank = ledger.rank(result.score)
        stats = ledger.stats()
    except StorageFailure as e:
        print(f"Warning: could not read leaderboard: {e}")
        return
    print(f"Rank: #{rank} of {stats.total_games}  (best {stats.highest_score}, avg {stats.average_score:.1f})")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Play one snake session with the autopilot")
    parser.add_argument("--board-size", choices=[s.name for s in BoardSize], type=str.upper,
                        help="Board size preset")
    parser.add_argument("--width", type=int, help="Board width (overrides preset)")
    parser.add_argument("--height", type=int, help="Board height (overrides preset)")
    parser.add_argument("--tier", help="Speed tier: Beginner, Normal or Expert")
    parser.add_argument("--player-name", help="Name stored with the score")
    parser.add_argument("--seed", type=int, help="Random seed for food and autopilot")
    parser.add_argument("--show-board", action="store_true", help="Print the board every tick")
    parser.add_argument("--realtime", action="store_true", help="Use real timers instead of a virtual clock")
    parser.add_argument("--max-ticks", type=int, default=DEFAULT_MAX_TICKS,
                        help="Give up after this many ticks (virtual clock only)")
    parser.add_argument("--no-persist", action="store_true", help="Keep scores in memory only")
    args = parser.parse_args(argv)

    settings = build_settings(args)
    configure_logging(settings.log_level)

    if args.no_persist:
        ledger: ScoreLedger = InMemoryScoreLedger()
    else:
        try:
            ledger = get_score_ledger()
        except StorageFailure as e:
            logger.warning("Score database unavailable (%s); keeping scores in memory", e)
            ledger = InMemoryScoreLedger()

    rng = random.Random(args.seed)
    player = AutopilotPlayer(rng=random.Random(args.seed))

    if args.realtime:
        loop = GameLoop(ledger, settings, rng=rng)
        result = run_realtime(loop, player, args.show_board)
    else:
        timers = ManualTimerFactory()
        clock = VirtualClock()
        loop = GameLoop(ledger, settings, timer_factory=timers, clock_ms=clock, rng=rng)
        result = run_fast(loop, timers, clock, player, args.max_ticks, args.show_board)

    report(result, ledger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
