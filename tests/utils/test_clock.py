"""Tests for server clock helpers."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from joytask.utils.clock import local_date, utc_now


class TestLocalDate:
    """Calendar date in the application timezone."""

    def test_utc(self):
        now = datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc)

        assert local_date(now, ZoneInfo("UTC")) == date(2024, 1, 1)

    def test_ahead_of_utc(self):
        now = datetime(2024, 1, 1, 15, 0, tzinfo=timezone.utc)

        assert local_date(now, ZoneInfo("Asia/Seoul")) == date(2024, 1, 2)

    def test_behind_utc(self):
        now = datetime(2024, 1, 1, 3, 0, tzinfo=timezone.utc)

        assert local_date(now, ZoneInfo("America/New_York")) == date(2023, 12, 31)

    def test_naive_datetime_is_utc(self):
        now = datetime(2024, 1, 1, 20, 0)

        assert local_date(now, ZoneInfo("Asia/Seoul")) == date(2024, 1, 2)

    def test_defaults_to_configured_timezone(self):
        # Test settings leave APP_TIMEZONE at UTC
        now = datetime(2024, 6, 30, 23, 30, tzinfo=timezone.utc)

        assert local_date(now) == date(2024, 6, 30)


def test_utc_now_is_aware():
    assert utc_now().tzinfo is not None
