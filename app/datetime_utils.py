"""
DateTime utility functions for request parsing and display.
"""
import re
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_YMD = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_YM = re.compile(r"^(\d{4})-(\d{2})$")


def parse_ymd(value):
    """
    Parse a 'YYYY-MM-DD' string into a date.

    Args:
        value: string, date, or None

    Returns:
        date, or None if value is empty

    Raises:
        ValueError: If the value is not a valid calendar date in YYYY-MM-DD form
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    match = _YMD.match(str(value).strip())
    if not match:
        raise ValueError(f"Expected a date in YYYY-MM-DD format, got {value!r}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def parse_month(value):
    """
    Parse 'YYYY-MM' (or a full 'YYYY-MM-DD') into the first day of that month.

    Raises:
        ValueError: If the value cannot be read as a month
    """
    text = str(value or "").strip()
    match = _YM.match(text)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        return date(year, month, 1)
    parsed = parse_ymd(text)
    if parsed is None:
        raise ValueError("month is required")
    return parsed.replace(day=1)


def parse_flag(value, default=False):
    """Read a boolean query/body flag ('1', 'true', 'yes', true)."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "t", "yes", "y", "on")


def today_in(tz_name=None):
    """
    Today's date in the given timezone (server local time if tz_name is None).

    Raises:
        ValueError: If tz_name is not a known IANA timezone
    """
    if not tz_name:
        return date.today()
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {tz_name}")
    return datetime.now(timezone.utc).astimezone(tz).date()
