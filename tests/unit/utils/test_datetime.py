import pytest
from datetime import datetime, date, timedelta, timezone

import tzlocal

from src.gcal_client.utils.datetime import (
    convert_datetime_to_iso,
    convert_datetime_to_local_timezone,
    date_end,
    date_start,
    days_from_today,
    expiry_from_seconds,
    parse_rfc3339,
    today_start,
    utc_now_naive
)


@pytest.mark.unit
class TestDatetimeUtil:
    """Test cases for datetime utility functions."""

    def test_convert_datetime_to_iso(self):
        local_tz = tzlocal.get_localzone()
        dt = datetime(2025, 1, 15, 14, 30, 0).replace(tzinfo=local_tz)

        result = convert_datetime_to_iso(dt)

        assert "2025-01-15" in result
        assert "14:30:00" in result
        assert parse_rfc3339(result) == dt

    def test_convert_datetime_to_iso_keeps_instant(self):
        dt = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
        assert parse_rfc3339(convert_datetime_to_iso(dt)) == dt

    def test_convert_datetime_to_local_timezone(self):
        dt = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
        result = convert_datetime_to_local_timezone(dt)
        assert result == dt
        assert result.tzinfo == tzlocal.get_localzone()

    def test_parse_rfc3339(self):
        assert parse_rfc3339("2025-01-15T09:00:00Z") == datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
        assert parse_rfc3339("2025-01-15T09:00:00-05:00").utcoffset() == timedelta(hours=-5)
        assert parse_rfc3339("garbage") is None
        assert parse_rfc3339("") is None

    def test_date_bounds(self):
        day = date(2025, 1, 15)
        start, end = date_start(day), date_end(day)

        assert start.hour == 0 and start.minute == 0
        assert end.hour == 23 and end.minute == 59
        assert start.date() == end.date() == day
        assert start.tzinfo is not None

    def test_today_start_and_days_from_today(self):
        assert today_start().date() == date.today()
        assert days_from_today(3).date() == date.today() + timedelta(days=3)
        assert days_from_today(-1).date() == date.today() - timedelta(days=1)

    def test_expiry_from_seconds(self):
        before = utc_now_naive()
        expiry = expiry_from_seconds(3600)

        assert expiry.tzinfo is None
        assert timedelta(seconds=3599) <= expiry - before <= timedelta(seconds=3601)
