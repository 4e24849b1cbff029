"""
Calendar arithmetic for job scheduling.

Pure date functions with no database or Flask dependencies. Every function
normalizes its inputs with at_midnight() so that time-of-day never affects
comparisons.
"""
from datetime import date, datetime, timedelta
from typing import List, Union

DateLike = Union[date, datetime, str]

# Monday=0 .. Sunday=6 (date.weekday())
SATURDAY = 5
SUNDAY = 6

GRID_ROWS = 6
DAYS_PER_WEEK = 7


def at_midnight(value: DateLike) -> date:
    """
    Truncate a date-like value to its calendar day.

    Args:
        value: date, datetime or ISO string ('YYYY-MM-DD' or a full ISO timestamp)

    Returns:
        date: The calendar day, with any time-of-day dropped
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    raise TypeError(f"Unsupported date value: {value!r}")


def is_weekend(value: DateLike) -> bool:
    """Return True for Saturday and Sunday."""
    return at_midnight(value).weekday() in (SATURDAY, SUNDAY)


def is_active_day(value: DateLike, include_weekends: bool) -> bool:
    """A day counts toward a job unless it is a weekend the job excludes."""
    return include_weekends or not is_weekend(value)


def advance_by_working_units(start: DateLike, units: int, include_weekends: bool) -> date:
    """
    Find the last day of a span that lasts `units` working days.

    The start day always counts as unit 1, even if it falls on a weekend
    and the span excludes weekends. Each further unit is consumed only by
    an active day.

    Args:
        start: First day of the span
        units: Duration in working units (values <= 1 return the start day)
        include_weekends: Whether Saturdays and Sundays count as working days

    Returns:
        date: The day on which the final unit is worked
    """
    current = at_midnight(start)
    if units <= 1:
        return current

    remaining = units - 1
    while remaining > 0:
        current += timedelta(days=1)
        if is_active_day(current, include_weekends):
            remaining -= 1
    return current


def month_grid(any_date_in_month: DateLike) -> List[List[date]]:
    """
    Build the 6x7 display grid for a month.

    The grid starts on the Monday on or before the 1st and always has six
    rows, so lead-in and lead-out days from adjacent months are included.
    """
    day = at_midnight(any_date_in_month)
    first = day.replace(day=1)
    grid_start = first - timedelta(days=first.weekday())

    return [
        [grid_start + timedelta(days=row * DAYS_PER_WEEK + col) for col in range(DAYS_PER_WEEK)]
        for row in range(GRID_ROWS)
    ]


def shift_month(value: DateLike, months: int) -> date:
    """Move a month cursor by `months`, returning the 1st of the target month."""
    day = at_midnight(value)
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def days_inclusive(start: DateLike, end: DateLike) -> int:
    """Calendar days from start to end inclusive (0 if end precedes start)."""
    diff = (at_midnight(end) - at_midnight(start)).days
    return diff + 1 if diff >= 0 else 0


def count_weekdays_inclusive(start: DateLike, end: DateLike) -> int:
    """
    Count Monday-Friday days from start to end inclusive.

    Counts whole weeks arithmetically and walks only the remainder.
    """
    first = at_midnight(start)
    total = days_inclusive(first, end)
    if total == 0:
        return 0

    full_weeks, remainder = divmod(total, DAYS_PER_WEEK)
    weekdays = full_weeks * 5
    start_dow = first.weekday()
    for offset in range(remainder):
        if (start_dow + offset) % DAYS_PER_WEEK not in (SATURDAY, SUNDAY):
            weekdays += 1
    return weekdays
