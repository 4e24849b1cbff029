"""
Day index: which jobs are worked on each calendar day.
"""
from typing import Dict, Iterable, List

from app.scheduling.calendar import DateLike, at_midnight
from app.scheduling.config import SchedulingConfig
from app.scheduling.spans import JobSpan, active_days, normalize_status


def day_key(value: DateLike) -> str:
    """Locale-independent 'YYYY-MM-DD' key for a day."""
    day = at_midnight(value)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def build_day_index(all_jobs: Iterable[JobSpan]) -> Dict[str, List[JobSpan]]:
    """
    Bucket every job under each of its active days.

    Jobs appear in each bucket in input order.
    """
    index: Dict[str, List[JobSpan]] = {}
    for job in all_jobs:
        for day in active_days(job):
            index.setdefault(day_key(day), []).append(job)
    return index


def jobs_on_day(index: Dict[str, List[JobSpan]], day: DateLike) -> List[JobSpan]:
    """Day-detail lookup; returns an empty list for free days."""
    return list(index.get(day_key(day), []))


def badge_status(jobs: Iterable[JobSpan]) -> str:
    """
    Pick the status that colors a day's badge.

    in_progress beats complete beats scheduled.
    """
    statuses = {normalize_status(job.status) for job in jobs}
    for status in SchedulingConfig.BADGE_PRIORITY:
        if status in statuses:
            return status
    return SchedulingConfig.STATUS_SCHEDULED


def badge_color(jobs: Iterable[JobSpan]) -> str:
    return SchedulingConfig.get_status_color(badge_status(jobs))
