"""
Flat-File Record Store

This module reads and writes the CSV collections the bot keeps its !first
submissions in. Each collection is one headerless CSV file in the data
folder, with columns [player, channel, timestamp, timezone].

Loading is tolerant: a timestamp that cannot be parsed becomes the UNIX
epoch instead of failing the whole collection.

Usage:
    from firstrank.storage.database import Database
    db = Database(DATA_FOLDER)
    rows = db.select("first_results", lambda r: r.channel == "#f1")
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pandas as pd

from firstrank.config import (
    COLLECTION_SUFFIX,
    DEFAULT_DELIMITER,
    SUBMISSION_COLUMNS,
)
from firstrank.utils import atomic_write_csv, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

EPOCH = pd.Timestamp(0, tz="UTC")


class DatabaseError(Exception):
    """Raised when a collection file exists but cannot be read"""
    pass


@dataclass(frozen=True)
class Submission:
    """One !first entry as stored by the bot."""

    player: str
    channel: str
    timestamp: datetime
    timezone: str

    def to_fields(self) -> list[str]:
        return [self.player, self.channel, format_timestamp(self.timestamp), self.timezone]


def format_timestamp(value: datetime) -> str:
    """
    Serialize an instant the way the bot writes it.

    E.g. "2025-03-14 07:42:00.250 UTC" or "2025-03-14 07:42:00.123456 UTC".
    """
    value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%d %H:%M:%S")
    if value.microsecond % 1000 == 0 and value.microsecond:
        text += f".{value.microsecond // 1000:03d}"
    elif value.microsecond:
        text += f".{value.microsecond:06d}"
    return f"{text} UTC"


def parse_timestamps(values: pd.Series) -> pd.Series:
    """
    Parse serialized instants, substituting EPOCH for anything unreadable.

    Args:
        values: Series of timestamp strings

    Returns:
        Series of tz-aware UTC timestamps truncated to microseconds
    """
    cleaned = values.astype(str).str.strip().str.replace(r"\s*UTC$", "", regex=True)
    parsed = pd.to_datetime(cleaned, utc=True, errors="coerce", format="ISO8601")

    bad = parsed.isna()
    if bad.any():
        logger.warning(f"{int(bad.sum())} timestamps could not be parsed, using {EPOCH}")
        parsed = parsed.fillna(EPOCH)

    return parsed.dt.floor("us")


class Database:
    """Directory of headerless CSV collections."""

    def __init__(self, path: Path | str, delimiter: str | None = None):
        self.path = Path(path)
        self.delimiter = delimiter or DEFAULT_DELIMITER

    def collection_path(self, collection: str) -> Path:
        return self.path / f"{collection}{COLLECTION_SUFFIX}"

    def _load_frame(self, collection: str) -> pd.DataFrame | None:
        path = self.collection_path(collection)
        if not path.exists():
            logger.warning(f"Collection {collection} not found at {path}")
            return None

        try:
            df = pd.read_csv(
                path,
                sep=self.delimiter,
                header=None,
                names=list(SUBMISSION_COLUMNS),
                index_col=False,
                dtype=str,
                keep_default_na=False,
            )
        except pd.errors.EmptyDataError:
            logger.info(f"Collection {collection} is empty")
            return None
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise DatabaseError(f"Could not read collection {collection} from {path}: {e}") from e

        logger.info(f"Loaded {len(df)} rows from {path}")
        return df.fillna("")

    def load(self, collection: str) -> list[Submission]:
        """Load every record of a collection, in file order."""
        df = self._load_frame(collection)
        if df is None or df.empty:
            return []

        timestamps = parse_timestamps(df["timestamp"])
        return [
            Submission(
                player=player,
                channel=channel,
                timestamp=stamp.to_pydatetime().astimezone(timezone.utc),
                timezone=tz_name.strip(),
            )
            for player, channel, stamp, tz_name in zip(
                df["player"], df["channel"], timestamps, df["timezone"]
            )
        ]

    def select(
        self,
        collection: str,
        predicate: Callable[[Submission], bool],
    ) -> list[Submission] | None:
        """
        Return the records of a collection matching a predicate.

        Args:
            collection: Collection name (file stem)
            predicate: Filter applied to each record

        Returns:
            Matching records in file order, or None if there are none

        Raises:
            DatabaseError: If the collection file is unreadable
        """
        matches = [r for r in self.load(collection) if predicate(r)]
        logger.info(f"Selected {len(matches)} rows from {collection}")
        return matches or None

    def insert(self, collection: str, record: Submission) -> Path:
        """
        Append one record to a collection, creating it if needed.

        Returns:
            Path to the collection file
        """
        path = self.collection_path(collection)
        existing = self._load_frame(collection)
        row = pd.DataFrame([record.to_fields()], columns=list(SUBMISSION_COLUMNS))
        df = row if existing is None else pd.concat([existing, row], ignore_index=True)

        atomic_write_csv(df, path, index=False, header=False, sep=self.delimiter)
        logger.info(f"Inserted 1 row into {collection} ({len(df)} total)")
        return path
