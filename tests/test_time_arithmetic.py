import sys
import time
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest


# Ensure src is importable
ROOT = Path(__file__).parent.parent
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


from servertime.time.arithmetic import (  # noqa: E402
    format_month_day_time,
    minutes_between,
    offset_to_absolute_instant,
    reference_instant,
)


class TestReferenceInstant:
    """Midnight two days ago"""

    def test_truncates_to_midnight(self):
        now = datetime(2026, 10, 18, 13, 47, 12, 345000)
        assert reference_instant(now) == datetime(2026, 10, 16, 0, 0, 0)

    def test_crosses_month_and_year(self):
        assert reference_instant(datetime(2026, 3, 1, 0, 5)) == datetime(2026, 2, 27)
        assert reference_instant(datetime(2027, 1, 1, 23, 59)) == datetime(2026, 12, 30)

    def test_deterministic(self):
        now = datetime(2026, 10, 18, 8, 0)
        assert reference_instant(now) == reference_instant(now)

    def test_at_least_two_days_in_the_past(self):
        now = datetime(2026, 10, 18, 0, 0)
        assert now - reference_instant(now) == timedelta(days=2)


class TestMinutesBetween:

    def test_exact_minutes(self):
        a = datetime(2026, 10, 18, 0, 0)
        assert minutes_between(a, a - timedelta(days=2)) == 2880

    def test_truncates_partial_minutes(self):
        b = datetime(2026, 10, 16)
        a = b + timedelta(minutes=5, seconds=59, milliseconds=999)
        assert minutes_between(a, b) == 5

    def test_negative_truncates_toward_zero(self):
        b = datetime(2026, 10, 16)
        a = b - timedelta(minutes=5, seconds=30)
        assert minutes_between(a, b) == -5


class TestOffsetToAbsoluteInstant:

    def test_positive_offset_means_server_behind(self):
        now = datetime(2026, 10, 18, 12, 0)
        assert offset_to_absolute_instant(90, now) == datetime(2026, 10, 18, 10, 30)

    def test_negative_offset_means_server_ahead(self):
        now = datetime(2026, 10, 18, 12, 0)
        assert offset_to_absolute_instant(-60, now) == datetime(2026, 10, 18, 13, 0)

    def test_zero_offset(self):
        now = datetime(2026, 10, 18, 12, 0)
        assert offset_to_absolute_instant(0, now) == now


def test_format_month_day_time():
    assert format_month_day_time(datetime(2026, 3, 7, 9, 5, 2)) == "03-07 09:05:02"


NEW_YORK = ZoneInfo("America/New_York")


@pytest.fixture
def new_york_tz(monkeypatch):
    """Pin the process local zone to America/New_York."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestAcrossDaylightSaving:
    """US clocks spring forward on 2026-03-08, inside the two day window"""

    def test_elapsed_minutes_with_zoneinfo(self):
        now = datetime(2026, 3, 9, 12, 0, tzinfo=NEW_YORK)
        ref = reference_instant(now)
        assert ref == datetime(2026, 3, 7, 0, 0, tzinfo=NEW_YORK)
        # 60 wall-clock hours, but only 59 real ones
        assert minutes_between(now, ref) == 3540

    def test_elapsed_minutes_with_local_naive_clock(self, new_york_tz):
        now = datetime(2026, 3, 9, 12, 0)
        assert minutes_between(now, reference_instant(now)) == 3540

    def test_elapsed_minutes_with_local_aware_clock(self, new_york_tz):
        now = datetime(2026, 3, 9, 12, 0).astimezone()
        ref = reference_instant(now)
        assert ref.replace(tzinfo=None) == datetime(2026, 3, 7, 0, 0)
        assert ref.utcoffset() == timedelta(hours=-5)
        assert minutes_between(now, ref) == 3540

    def test_fall_back_adds_an_hour(self):
        now = datetime(2026, 11, 2, 12, 0, tzinfo=NEW_YORK)
        assert minutes_between(now, reference_instant(now)) == 3660

    def test_server_time_uses_real_elapsed_time(self):
        now = datetime(2026, 3, 8, 12, 0, tzinfo=NEW_YORK)
        server_now = offset_to_absolute_instant(90, now)
        assert server_now == datetime(2026, 3, 8, 10, 30, tzinfo=NEW_YORK)
        # 03:30 EDT minus two real hours is 00:30 EST
        early = datetime(2026, 3, 8, 3, 30, tzinfo=NEW_YORK)
        assert offset_to_absolute_instant(120, early).replace(tzinfo=None) == datetime(2026, 3, 8, 0, 30)
