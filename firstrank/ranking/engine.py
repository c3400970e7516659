"""
!first Ranking Engine

This module ranks the fastest !first winners from the submission history.
For every local calendar day it reconstructs the bot's opening time, finds
the quickest submission made after it, and then builds a global leaderboard:
- Only guesses strictly after the opening and within the cutoff count
- Days are ranked by their winning delta, fastest first
- Each player appears once, with their best day

Usage:
    from firstrank.ranking.engine import rank
    leaderboard = rank(submissions)
"""

from dataclasses import dataclass
from datetime import date
from itertools import groupby
from typing import Iterable, Iterator

from firstrank.config import CUTOFF_US, MAX_RESULTS, RAND_OPEN_HOUR, RAND_OPEN_MIN
from firstrank.ranking.delta import DeltaError, delta, local_date
from firstrank.storage.database import Submission
from firstrank.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class RankingConfig:
    """Tunable values of a ranking run."""

    cutoff_us: int = CUTOFF_US
    max_results: int = MAX_RESULTS
    open_hour_range: tuple[int, int] = RAND_OPEN_HOUR
    open_minute_range: tuple[int, int] = RAND_OPEN_MIN
    # Key-based grouping instead of contiguous runs of equal local dates
    partition_by_date: bool = False


DEFAULT_CONFIG = RankingConfig()


@dataclass(frozen=True)
class RankedEntry:
    """Winning submission of one day."""

    date: date
    delta_us: int
    player: str

    @property
    def delta_ms(self) -> int:
        return self.delta_us // 1000


def _dated(submissions: Iterable[Submission]) -> Iterator[tuple[date, Submission]]:
    """Pair each submission with its local date, skipping unknown timezones."""
    for s in submissions:
        try:
            yield local_date(s), s
        except DeltaError as e:
            logger.warning(f"Skipping submission by {s.player} at {s.timestamp}: {e}")


def group_by_local_date(
    submissions: Iterable[Submission],
    partition: bool = False,
) -> list[tuple[date, list[Submission]]]:
    """
    Group submissions into days by their own local date.

    Args:
        submissions: Submissions in store order
        partition: If False, only adjacent submissions with the same date form
            a group (the store is expected to be ordered by date). If True,
            all submissions sharing a date are collected together.

    Returns:
        List of (date, members) in order of first appearance
    """
    dated = _dated(submissions)

    if not partition:
        return [
            (day, [s for _, s in run])
            for day, run in groupby(dated, key=lambda pair: pair[0])
        ]

    days: dict[date, list[Submission]] = {}
    for day, s in dated:
        days.setdefault(day, []).append(s)
    return list(days.items())


def best_of_day(
    day: date,
    members: list[Submission],
    config: RankingConfig = DEFAULT_CONFIG,
) -> RankedEntry | None:
    """
    Pick the winner of one day.

    The winner is the smallest strictly positive delta. The day is dropped
    when nobody guessed after the opening or the winner is slower than the cutoff.

    Returns:
        RankedEntry, or None if the day does not qualify
    """
    candidates = []
    for s in members:
        try:
            micros, player = delta(day, s, config.open_hour_range, config.open_minute_range)
        except DeltaError as e:
            logger.warning(f"Skipping submission by {s.player} on {day}: {e}")
            continue
        if micros > 0:
            candidates.append((micros, player))

    if not candidates:
        return None

    # min() keeps the first of equal deltas
    micros, player = min(candidates, key=lambda c: c[0])
    if micros > config.cutoff_us:
        return None
    return RankedEntry(day, micros, player)


def unique_by_player(entries: Iterable[RankedEntry]) -> Iterator[RankedEntry]:
    """Keep only the first entry of each player."""
    seen = set()
    for entry in entries:
        if entry.player in seen:
            continue
        seen.add(entry.player)
        yield entry


def rank(
    submissions: Iterable[Submission],
    config: RankingConfig = DEFAULT_CONFIG,
) -> list[RankedEntry]:
    """
    Compute the top !first results, fastest first.

    1. Group entries by local date.
    2. For each date, pick the fastest guess after the opening time,
       dropping the day if it is slower than the cutoff.
    3. Sort all days by delta (stable).
    4. Keep each player's best day only.
    5. Truncate to config.max_results.

    Args:
        submissions: Submissions in store order
        config: Ranking configuration

    Returns:
        List of RankedEntry, best first
    """
    groups = group_by_local_date(submissions, partition=config.partition_by_date)
    logger.info(f"Ranking {len(groups)} days")

    winners = [
        entry
        for entry in (best_of_day(day, members, config) for day, members in groups)
        if entry is not None
    ]
    logger.info(f"{len(winners)} days have a winner within {config.cutoff_us} us")

    winners.sort(key=lambda e: e.delta_us)
    ranked = list(unique_by_player(winners))[:max(config.max_results, 0)]
    logger.info(f"Leaderboard has {len(ranked)} entries")
    return ranked
