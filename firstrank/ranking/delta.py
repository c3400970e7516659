"""
Delta Calculator

Computes how far after (or before) the opening time a submission was made,
measured in the submitter's own timezone.
"""

from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from firstrank.config import RAND_OPEN_HOUR, RAND_OPEN_MIN
from firstrank.ranking.opening import opening_time
from firstrank.storage.database import Submission

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1
ONE_MICROSECOND = timedelta(microseconds=1)


class DeltaError(Exception):
    """Base class for per-submission delta errors"""
    pass


class BadTimezone(DeltaError):
    """The submission's timezone name cannot be resolved"""
    pass


class BadLocalTime(DeltaError):
    """The local opening instant does not exist or is ambiguous"""
    pass


class PrecisionError(DeltaError):
    """The difference does not fit in signed 64-bit microseconds"""
    pass


@lru_cache(maxsize=None)
def resolve_timezone(name: str) -> ZoneInfo:
    """
    Look up an IANA zone name such as "Europe/Madrid".

    Raises:
        BadTimezone: If the name is not a known zone
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise BadTimezone(f"Bad timezone {name!r}: {e}") from e


def local_date(submission: Submission) -> date:
    """Calendar date of a submission in its own timezone."""
    tz = resolve_timezone(submission.timezone)
    return submission.timestamp.astimezone(tz).date()


def local_opening_time(local_player_time: datetime, hour: int, minute: int) -> datetime:
    """
    Move a local time to hour:minute:00.000000 on the same local date.

    Raises:
        BadLocalTime: If the wall time is invalid, skipped or repeated in that zone
    """
    try:
        opening = local_player_time.replace(
            hour=hour, minute=minute, second=0, microsecond=0, fold=0
        )
    except ValueError as e:
        raise BadLocalTime(f"Bad time {hour}:{minute}: {e}") from e

    # Both folds agree only when the wall time maps to exactly one instant
    if opening.utcoffset() != opening.replace(fold=1).utcoffset():
        raise BadLocalTime(
            f"{opening.replace(tzinfo=None)} is not a unique time in {opening.tzinfo}"
        )
    return opening


def delta(
    day: date,
    submission: Submission,
    hour_range: tuple[int, int] = RAND_OPEN_HOUR,
    minute_range: tuple[int, int] = RAND_OPEN_MIN,
) -> tuple[int, str]:
    """
    Signed gap between a submission and that day's opening time.

    Args:
        day: Local date the submission is ranked under
        submission: The submission
        hour_range: Opening hour draw range
        minute_range: Opening minute draw range

    Returns:
        Tuple of (delta in microseconds, player)

    Raises:
        BadTimezone, BadLocalTime, PrecisionError
    """
    tz = resolve_timezone(submission.timezone)
    local_player_time = submission.timestamp.astimezone(tz)

    # Same seed as the bot: the day of the month
    open_hour, open_minute = opening_time(day.day, hour_range, minute_range)
    opening = local_opening_time(local_player_time, open_hour, open_minute)

    # Compare instants, same-tzinfo subtraction would compare wall times
    gap = local_player_time.astimezone(timezone.utc) - opening.astimezone(timezone.utc)
    micros = gap // ONE_MICROSECOND
    if not I64_MIN <= micros <= I64_MAX:
        raise PrecisionError(f"Delta of {gap} does not fit in 64-bit microseconds")

    return micros, submission.player
