#!/usr/bin/env python3
"""
Delete every recorded score.

The schema is preserved; only rows are removed. This cannot be undone.

Usage:
    python backend/cli/reset_scores.py [--confirm]
"""

import argparse
import os
import sys

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from data_access import ScoreLedger, get_score_ledger  # noqa: E402
from database import get_backend, get_database_path  # noqa: E402
from domain.errors import StorageFailure  # noqa: E402


def reset_scores(ledger: ScoreLedger, confirm: bool = False) -> bool:
    """
    Clear the score ledger.

    Args:
        ledger: Ledger to clear
        confirm: If True, skip confirmation prompt

    Returns:
        True if the reset happened, False if cancelled or failed
    """
    if not confirm:
        location = get_database_path() if get_backend() == 'sqlite' else 'PostgreSQL (DATABASE_URL)'
        print("=" * 70)
        print("⚠️  SCORE RESET WARNING ⚠️")
        print("=" * 70)
        print(f"Database: {location}")
        try:
            count = ledger.total_games()
        except StorageFailure as e:
            print(f"\n❌ Error reading scores: {e}")
            return False
        print(f"\nThis will DELETE all {count} recorded games.")
        print("=" * 70)

        response = input("\nType 'RESET' to confirm: ")

        if response != 'RESET':
            print("❌ Reset cancelled")
            return False

    try:
        deleted = ledger.clear()
    except StorageFailure as e:
        print(f"\n❌ Error clearing scores: {e}")
        return False

    print(f"✅ Cleared {deleted} score records")
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Delete every recorded score"
    )
    parser.add_argument(
        '--confirm',
        action='store_true',
        help="Skip confirmation prompt"
    )

    args = parser.parse_args(argv)

    try:
        ledger = get_score_ledger()
    except StorageFailure as e:
        print(f"❌ Could not open score database: {e}")
        sys.exit(1)

    success = reset_scores(ledger, confirm=args.confirm)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
