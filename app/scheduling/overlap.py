"""
Overlap detection between job spans.

Two spans conflict only if they are both worked on the same day. Because
each span carries its own weekend policy, a shared weekend inside both date
ranges is not a conflict unless both spans are active on it.
"""
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from app.scheduling.calendar import DateLike, at_midnight
from app.scheduling.spans import JobSpan, Span


def ranges_overlap(a_start: DateLike, a_end: DateLike, b_start: DateLike, b_end: DateLike) -> bool:
    """Inclusive date-range intersection test (ignores weekend policy)."""
    return at_midnight(a_start) <= at_midnight(b_end) and at_midnight(b_start) <= at_midnight(a_end)


def clamp_overlap(
    a_start: DateLike,
    a_end: DateLike,
    b_start: DateLike,
    b_end: DateLike
) -> Optional[Tuple[date, date]]:
    """
    Intersect two inclusive date ranges.

    Returns:
        (start, end) of the shared window, or None if the ranges are disjoint
    """
    if not ranges_overlap(a_start, a_end, b_start, b_end):
        return None
    start = max(at_midnight(a_start), at_midnight(b_start))
    end = min(at_midnight(a_end), at_midnight(b_end))
    return start, end


def overlaps(a: Span, b: Span) -> bool:
    """
    True iff the two spans are active on at least one common day.

    The raw range intersection narrows the window; each day in it is then
    checked against both spans' own active-day predicates.
    """
    window = clamp_overlap(a.start_day, a.end_day, b.start_day, b.end_day)
    if window is None:
        return False

    day, end = window
    while day <= end:
        if a.is_active(day) and b.is_active(day):
            return True
        day += timedelta(days=1)
    return False


def is_free(proposed: Span, all_jobs: Iterable[JobSpan]) -> bool:
    """True if no job in `all_jobs` overlaps the proposed span."""
    return not any(overlaps(proposed, job) for job in all_jobs)


def conflicting_jobs(proposed: Span, all_jobs: Iterable[JobSpan]) -> List[JobSpan]:
    """Every job that overlaps the proposed span, in input order."""
    return [job for job in all_jobs if overlaps(proposed, job)]


def overlap_working_days(span: Span, period_start: DateLike, period_end: DateLike) -> int:
    """
    Count the days a span is worked inside a period (inclusive).

    Args:
        span: JobSpan or ProposedSpan
        period_start: First day of the period
        period_end: Last day of the period

    Returns:
        int: Number of active days of the span within the period
    """
    window = clamp_overlap(span.start_day, span.end_day, period_start, period_end)
    if window is None:
        return 0

    day, end = window
    count = 0
    while day <= end:
        if span.is_active(day):
            count += 1
        day += timedelta(days=1)
    return count
