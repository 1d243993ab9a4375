from datetime import datetime, date, time, timedelta, timezone
from typing import Optional
import tzlocal


def convert_datetime_to_iso(date_time: datetime) -> str:
    """
    Converts a given datetime object to an RFC3339 string, adjusted
    to the local timezone. Naive datetimes are taken as local time.

    Args:
        date_time: The datetime object to be converted.

    Returns:
        The RFC3339 formatted string of the datetime in the local timezone.
    """
    return date_time.astimezone(tzlocal.get_localzone()).isoformat()


def convert_datetime_to_local_timezone(date_time: datetime) -> datetime:
    """
    Converts a given datetime object to a local-timezone-aware datetime.
    Args:
        date_time: The datetime object to be converted.

    Returns:
        A datetime object in the local timezone.
    """
    return datetime.astimezone(date_time, tzlocal.get_localzone())


def parse_rfc3339(value: str) -> Optional[datetime]:
    """Parse an RFC3339 timestamp as sent by the API, None if unparseable."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def date_start(day: date) -> datetime:
    """Local-timezone midnight at the start of the given day."""
    return datetime.combine(day, time.min).replace(tzinfo=tzlocal.get_localzone())


def date_end(day: date) -> datetime:
    """Last representable local time of the given day."""
    return datetime.combine(day, time.max).replace(tzinfo=tzlocal.get_localzone())


def today_start() -> datetime:
    return date_start(date.today())


def days_from_today(days: int) -> datetime:
    """Start of the day `days` days away from today (negative for the past)."""
    return date_start(date.today() + timedelta(days=days))


def utc_now_naive() -> datetime:
    """Current UTC time without tzinfo, the form google-auth uses for expiry."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def expiry_from_seconds(seconds: int) -> datetime:
    return utc_now_naive() + timedelta(seconds=seconds)
