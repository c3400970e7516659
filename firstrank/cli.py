"""
!first Leaderboard Command Line

Prints the fastest !first winners of a channel, optionally limited to a period.

Usage:
    firstrank <channel> [day|today|daily|week|weekly|month|monthly|year|yearly]
    OR
    python -m firstrank.cli <channel> [period]
"""

import sys
from pathlib import Path

# Enable both `python firstrank/cli.py` and `python -m firstrank.cli` execution modes.
# This ensures firstrank.config imports work regardless of how the script is invoked.
_project_root = str(Path(__file__).parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import argparse
import logging
from datetime import datetime

from firstrank.config import DATA_FOLDER, DATABASE_COLLECTION, MAX_RESULTS
from firstrank.ranking.engine import RankedEntry, RankingConfig, rank
from firstrank.ranking.period import resolve_period
from firstrank.storage.database import Database, DatabaseError, Submission
from firstrank.utils import set_log_level, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

HEADER = "Top !first results (smallest gaps to the opening time of winners):"


class UsageError(Exception):
    """Raised when the command line is missing required arguments"""
    pass


class EmptyResultError(Exception):
    """Raised when nothing is left to rank or print"""
    pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="firstrank",
        description="Rank the fastest !first winners of a channel.",
    )
    parser.add_argument("channel", nargs="?", help="Channel to rank (case-insensitive)")
    parser.add_argument("period", nargs="?", help="day, today, daily, week, weekly, month, monthly, year or yearly")
    parser.add_argument("--data-dir", type=Path, default=DATA_FOLDER, help="Folder holding the collections")
    parser.add_argument("--collection", default=DATABASE_COLLECTION, help="Collection to read")
    parser.add_argument("--max-results", type=int, default=MAX_RESULTS, help="Leaderboard length")
    parser.add_argument(
        "--partition-by-date",
        action="store_true",
        help="Group all submissions of a date even if they are not adjacent in the store",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def load_submissions(
    db: Database,
    collection: str,
    channel: str,
    since: datetime,
) -> list[Submission]:
    """
    Select the submissions of a channel made at or after `since`.

    Raises:
        EmptyResultError: If nothing matches or the store cannot be read
    """
    wanted = channel.lower()
    try:
        results = db.select(
            collection,
            lambda r: r.channel.lower() == wanted and r.timestamp >= since,
        )
    except DatabaseError as e:
        logger.error(str(e))
        raise EmptyResultError("No results found") from e

    if not results:
        raise EmptyResultError("No results found")
    return results


def run(
    channel: str | None,
    period: str | None,
    db: Database,
    collection: str = DATABASE_COLLECTION,
    config: RankingConfig | None = None,
    now: datetime | None = None,
) -> list[RankedEntry]:
    """
    Build the leaderboard for a channel.

    Raises:
        UsageError: If no channel is given
        EmptyResultError: If there is nothing to show
    """
    if not channel:
        raise UsageError("A channel must be provided")

    since = resolve_period(period, now)
    logger.info(f"Ranking {channel} since {since.isoformat()}")

    submissions = load_submissions(db, collection, channel, since)
    leaderboard = rank(submissions, config or RankingConfig())
    if not leaderboard:
        raise EmptyResultError("No results found")
    return leaderboard


def format_leaderboard(entries: list[RankedEntry]) -> list[str]:
    """Render entries as "N. YYYY-MM-DD player D ms" lines."""
    return [
        f"{pos}. {entry.date.isoformat()} {entry.player} {entry.delta_ms} ms"
        for pos, entry in enumerate(entries, start=1)
    ]


def main(argv: list[str] | None = None) -> int:
    """CLI interface for the !first leaderboard."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_log_level(logging.INFO)

    config = RankingConfig(
        max_results=args.max_results,
        partition_by_date=args.partition_by_date,
    )

    try:
        leaderboard = run(
            args.channel,
            args.period,
            Database(args.data_dir),
            collection=args.collection,
            config=config,
        )
    except (UsageError, EmptyResultError) as e:
        print(e)
        return 1

    print(HEADER)
    for line in format_leaderboard(leaderboard):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
