#!/usr/bin/env python3
"""
Show the score leaderboard.

Prints the top scores with aggregate statistics, or where a given score
would rank.

Usage:
    python backend/cli/leaderboard.py [--limit 10]
    python backend/cli/leaderboard.py --rank 42
    python backend/cli/leaderboard.py --json
"""

import argparse
import json
import os
import sys
import time
from typing import List

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from data_access import ScoreLedger, get_score_ledger  # noqa: E402
from domain.errors import StorageFailure  # noqa: E402
from domain.score import ScoreRecord  # noqa: E402

DEFAULT_LIMIT = 10


def format_table(records: List[ScoreRecord], now_ms: int) -> str:
    lines = [f"{'#':>3}  {'Player':<10}  {'Score':>5}  {'Len':>4}  {'Tier':<8}  {'Time':>7}  When"]
    lines.append("-" * 60)
    for position, record in enumerate(records, start=1):
        lines.append(
            f"{position:>3}  {record.player_name:<10}  {record.score:>5}  "
            f"{record.snake_length:>4}  {record.speed_tier:<8}  "
            f"{record.formatted_duration:>7}  {record.relative_time(now_ms)}"
        )
    return "\n".join(lines)


def show_leaderboard(ledger: ScoreLedger, limit: int, as_json: bool = False) -> None:
    records = ledger.top_n(limit)
    stats = ledger.stats()

    if as_json:
        print(json.dumps({
            'scores': [r.to_dict() for r in records],
            'highest_score': stats.highest_score,
            'total_games': stats.total_games,
            'average_score': stats.average_score,
        }, indent=2))
        return

    if not records:
        print("No games recorded yet.")
        return

    print(format_table(records, int(time.time() * 1000)))
    print()
    print(f"Games played: {stats.total_games}")
    print(f"Best score:   {stats.highest_score}")
    print(f"Average:      {stats.average_score:.1f}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Show the snake score leaderboard")
    parser.add_argument('--limit', type=int, default=DEFAULT_LIMIT, help="Number of scores to show")
    parser.add_argument('--rank', type=int, help="Print the rank a score would have")
    parser.add_argument('--json', action='store_true', help="Print machine-readable output")
    args = parser.parse_args(argv)

    try:
        ledger = get_score_ledger()
        if args.rank is not None:
            print(f"A score of {args.rank} ranks #{ledger.rank(args.rank)}")
        else:
            show_leaderboard(ledger, args.limit, as_json=args.json)
    except StorageFailure as e:
        print(f"❌ Could not read leaderboard: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
