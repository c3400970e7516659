"""Reconstruction of the bot's daily opening time."""

from functools import lru_cache

from firstrank.config import RAND_OPEN_HOUR, RAND_OPEN_MIN
from firstrank.ranking.rng import StdRng


@lru_cache(maxsize=None)
def opening_time(
    month_day: int,
    hour_range: tuple[int, int] = RAND_OPEN_HOUR,
    minute_range: tuple[int, int] = RAND_OPEN_MIN,
) -> tuple[int, int]:
    """
    Regenerate the (hour, minute) the bot opened at on a given day of the month.

    The bot seeds a fresh generator with the day of the month for each draw,
    so the hour and the minute both come from the first word of the same stream.

    Args:
        month_day: Day of the month (1-31)
        hour_range: Half-open hour range used by the bot
        minute_range: Half-open minute range used by the bot

    Returns:
        Tuple of (hour, minute)
    """
    hour = StdRng.seed_from_u64(month_day).random_range(*hour_range)
    minute = StdRng.seed_from_u64(month_day).random_range(*minute_range)
    return hour, minute
