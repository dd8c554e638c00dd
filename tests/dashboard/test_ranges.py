"""Tests for range token resolution."""

from datetime import datetime, timedelta, timezone

import pytest

from dashboard.ranges import (
    is_average_range,
    normalize_time_range,
    resolve_range,
    resolve_time_range,
    to_db_timestamp,
)

NOW = datetime(2024, 5, 10, 12, 30, tzinfo=timezone.utc)


class TestResolveRange:
    def test_seven_days(self):
        assert resolve_range("7", NOW) == "2024-05-03"

    def test_thirty_days(self):
        assert resolve_range("30", NOW) == "2024-04-10"

    @pytest.mark.parametrize("token", ["all", None, "", "90", "week"])
    def test_no_bound(self, token):
        assert resolve_range(token, NOW) is None


class TestResolveTimeRange:
    def test_seven_days_keeps_time(self):
        assert resolve_time_range("7days", NOW) == NOW - timedelta(days=7)

    def test_thirty_days(self):
        assert resolve_time_range("30days", NOW) == NOW - timedelta(days=30)

    @pytest.mark.parametrize("token", ["today", None, "yesterday"])
    def test_today_is_local_midnight(self, token):
        start = resolve_time_range(token, NOW)
        assert (start.hour, start.minute, start.second) == (0, 0, 0)
        assert start <= NOW
        assert NOW - start < timedelta(days=1)

    def test_normalize(self):
        assert normalize_time_range("30days") == "30days"
        assert normalize_time_range("bogus") == "today"
        assert normalize_time_range(None) == "today"

    def test_is_average_range(self):
        assert is_average_range("7days")
        assert is_average_range("30days")
        assert not is_average_range("today")
        assert not is_average_range(None)


def test_to_db_timestamp_is_utc():
    dt = datetime(2024, 5, 10, 19, 0, tzinfo=timezone(timedelta(hours=7)))
    assert to_db_timestamp(dt) == "2024-05-10T12:00:00+00:00"
