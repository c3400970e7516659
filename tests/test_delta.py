"""
Tests for delta computation.
"""

from datetime import date, datetime, timezone

import pytest

import firstrank.ranking.delta as delta_module
from firstrank.ranking.delta import (
    BadLocalTime,
    BadTimezone,
    PrecisionError,
    delta,
    local_date,
    resolve_timezone,
)
from firstrank.storage.database import Submission


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestResolveTimezone:
    """Tests for resolve_timezone."""

    def test_known_zone(self):
        assert str(resolve_timezone("Europe/Madrid")) == "Europe/Madrid"

    def test_unknown_zone(self):
        with pytest.raises(BadTimezone):
            resolve_timezone("Mars/Olympus_Mons")

    def test_empty_zone(self):
        with pytest.raises(BadTimezone):
            resolve_timezone("")


class TestLocalDate:
    """Tests for local_date."""

    def test_date_follows_submitter_zone(self):
        # 20:04 UTC on Jan 1 is already Jan 2 in Tokyo
        s = Submission("kenji", "#f1", utc(2025, 1, 1, 20, 4), "Asia/Tokyo")
        assert local_date(s) == date(2025, 1, 2)

    def test_utc_date(self):
        s = Submission("kenji", "#f1", utc(2025, 1, 1, 20, 4), "UTC")
        assert local_date(s) == date(2025, 1, 1)


class TestDelta:
    """Tests for delta."""

    def test_winter_offset(self):
        # Opening on the 1st is 10:48, Madrid is UTC+1 in January
        s = Submission("alice", "#f1", utc(2025, 1, 1, 9, 48, 0, 50_000), "Europe/Madrid")
        assert delta(date(2025, 1, 1), s) == (50_000, "alice")

    def test_summer_offset(self):
        # New York is UTC-4 in July
        s = Submission("bob", "#f1", utc(2025, 7, 1, 14, 48, 0, 250_000), "America/New_York")
        assert delta(date(2025, 7, 1), s) == (250_000, "bob")

    def test_before_opening_is_negative(self):
        s = Submission("carol", "#f1", utc(2025, 1, 1, 10, 47, 59, 990_000), "UTC")
        assert delta(date(2025, 1, 1), s) == (-10_000, "carol")

    def test_whole_minutes_late(self):
        # Opening on the 2nd is 05:04
        s = Submission("dave", "#f1", utc(2025, 1, 2, 5, 6, 30), "UTC")
        assert delta(date(2025, 1, 2), s) == (150_000_000, "dave")

    def test_bad_timezone(self):
        s = Submission("erin", "#f1", utc(2025, 1, 1, 10, 48, 1), "Not/AZone")
        with pytest.raises(BadTimezone):
            delta(date(2025, 1, 1), s)

    def test_opening_in_spring_forward_gap(self):
        # 02:22 does not exist in Madrid on 2025-03-30
        s = Submission("frank", "#f1", utc(2025, 3, 30, 8, 0), "Europe/Madrid")
        with pytest.raises(BadLocalTime):
            delta(date(2025, 3, 30), s, hour_range=(2, 3))

    def test_opening_in_fall_back_overlap(self):
        # 02:xx happens twice in Madrid on 2025-10-26
        s = Submission("grace", "#f1", utc(2025, 10, 26, 8, 0), "Europe/Madrid")
        with pytest.raises(BadLocalTime):
            delta(date(2025, 10, 26), s, hour_range=(2, 3))

    def test_invalid_hour(self):
        s = Submission("heidi", "#f1", utc(2025, 1, 1, 10, 0), "UTC")
        with pytest.raises(BadLocalTime):
            delta(date(2025, 1, 1), s, hour_range=(24, 25))

    def test_precision_error(self, monkeypatch):
        monkeypatch.setattr(delta_module, "I64_MAX", 1_000)
        s = Submission("ivan", "#f1", utc(2025, 1, 1, 10, 48, 0, 50_000), "UTC")
        with pytest.raises(PrecisionError):
            delta(date(2025, 1, 1), s)
