"""
Period keywords for limiting the leaderboard to recent submissions.

Calendar keywords (day, week, month, year) go back to the start of the
current UTC period. Rolling keywords (daily, weekly, monthly, yearly) go
back a fixed number of days from now.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Period(Enum):
    DAY = "day"
    DAILY = "daily"
    WEEK = "week"
    WEEKLY = "weekly"
    MONTH = "month"
    MONTHLY = "monthly"
    YEAR = "year"
    YEARLY = "yearly"
    UNKNOWN = "unknown"


_KEYWORDS = {
    "day": Period.DAY,
    "today": Period.DAY,
    "daily": Period.DAILY,
    "week": Period.WEEK,
    "weekly": Period.WEEKLY,
    "month": Period.MONTH,
    "monthly": Period.MONTHLY,
    "year": Period.YEAR,
    "yearly": Period.YEARLY,
}

_ROLLING_DAYS = {
    Period.DAILY: 1,
    Period.WEEKLY: 7,
    Period.MONTHLY: 30,
    Period.YEARLY: 365,
}


def parse_period(keyword: str | None) -> Period:
    """Map a command-line keyword to a Period, UNKNOWN for anything else."""
    if keyword is None:
        return Period.UNKNOWN
    return _KEYWORDS.get(keyword, Period.UNKNOWN)


def start_date(period: Period, now: datetime | None = None) -> datetime:
    """
    Compute the earliest instant a submission may have to count for a period.

    Args:
        period: Period to go back over
        now: Current instant (default: datetime.now(timezone.utc))

    Returns:
        Aware UTC datetime; EPOCH (no filtering) for Period.UNKNOWN
    """
    if period is Period.UNKNOWN:
        return EPOCH

    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)

    if period in _ROLLING_DAYS:
        return now - timedelta(days=_ROLLING_DAYS[period])

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period is Period.DAY:
        return midnight
    if period is Period.WEEK:
        # Monday -> 0 days back ... Sunday -> 6 days back
        return midnight - timedelta(days=now.weekday())
    if period is Period.MONTH:
        return midnight.replace(day=1)
    # Period.YEAR
    return midnight.replace(month=1, day=1)


def resolve_period(keyword: str | None, now: datetime | None = None) -> datetime:
    """Shortcut for start_date(parse_period(keyword), now)."""
    return start_date(parse_period(keyword), now)
