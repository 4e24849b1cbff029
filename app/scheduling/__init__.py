"""
Job calendar scheduling engine.

Working-day arithmetic, conflict detection between jobs with different
weekend policies, next-available start search, and week band layout for
the calendar view. Everything in this package except service.py is pure
and has no Flask or database dependency.
"""

from app.scheduling.config import SchedulingConfig
from app.scheduling.calendar import (
    at_midnight,
    is_weekend,
    is_active_day,
    advance_by_working_units,
    month_grid,
    shift_month,
    days_inclusive,
    count_weekdays_inclusive,
)
from app.scheduling.spans import (
    JobSpan,
    ProposedSpan,
    normalize_status,
    to_job_span,
    to_job_spans,
    active_days,
    reschedule_fields,
)
from app.scheduling.overlap import (
    ranges_overlap,
    clamp_overlap,
    overlaps,
    is_free,
    conflicting_jobs,
    overlap_working_days,
)
from app.scheduling.availability import (
    AvailabilityResult,
    next_available_start,
    check_availability,
)
from app.scheduling.day_index import (
    day_key,
    build_day_index,
    jobs_on_day,
    badge_status,
    badge_color,
)
from app.scheduling.week_layout import (
    WeekBand,
    WeekLayout,
    active_columns,
    compress_segments,
    jobs_in_week,
    build_week_layout,
    proposed_segments,
)
from app.scheduling.month_view import build_month_view

__all__ = [
    'SchedulingConfig',
    'at_midnight',
    'is_weekend',
    'is_active_day',
    'advance_by_working_units',
    'month_grid',
    'shift_month',
    'days_inclusive',
    'count_weekdays_inclusive',
    'JobSpan',
    'ProposedSpan',
    'normalize_status',
    'to_job_span',
    'to_job_spans',
    'active_days',
    'reschedule_fields',
    'ranges_overlap',
    'clamp_overlap',
    'overlaps',
    'is_free',
    'conflicting_jobs',
    'overlap_working_days',
    'AvailabilityResult',
    'next_available_start',
    'check_availability',
    'day_key',
    'build_day_index',
    'jobs_on_day',
    'badge_status',
    'badge_color',
    'WeekBand',
    'WeekLayout',
    'active_columns',
    'compress_segments',
    'jobs_in_week',
    'build_week_layout',
    'proposed_segments',
    'build_month_view',
]
