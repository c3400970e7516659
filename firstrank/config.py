"""
Central configuration for the !first leaderboard.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

import logging
from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"

# --- Record Store Configuration ---
DATABASE_COLLECTION = "first_results"  # Collection written by the bot
COLLECTION_SUFFIX = ".csv"
DEFAULT_DELIMITER = ","

# Column order of a stored submission row
SUBMISSION_COLUMNS = ("player", "channel", "timestamp", "timezone")

# --- Ranking Configuration ---
MAX_RESULTS = 10  # Leaderboard length
CUTOFF_US = 1_000_000  # Slowest prize-worthy guess after opening (1 second)

# Opening-time draw ranges, half-open [low, high).
# These must match the bot exactly, they are part of the seed contract.
RAND_OPEN_HOUR = (5, 12)
RAND_OPEN_MIN = (0, 59)

# --- Logging ---
LOG_LEVEL = logging.WARNING  # Keep stdout/stderr quiet unless --verbose
