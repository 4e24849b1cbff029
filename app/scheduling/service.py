"""
Scheduling service for reading Job records into the calendar engine and
writing new bookings and reschedules back.

This is the only module in the scheduling package that touches the
database; it converts Job rows to spans and delegates every calculation to
the pure engine modules.
"""

from datetime import date, datetime
from typing import List, Optional

from app.models import Job, db
from app.scheduling.availability import AvailabilityResult, check_availability
from app.scheduling.config import SchedulingConfig
from app.scheduling.day_index import build_day_index, jobs_on_day
from app.scheduling.month_view import MonthView, build_month_view
from app.scheduling.spans import JobSpan, ProposedSpan, reschedule_fields, to_job_spans
from app.logging_config import OperationContext, get_logger

logger = get_logger(__name__)


class SchedulingConflictError(Exception):
    """Raised when a new booking or a reschedule would overlap other jobs."""

    def __init__(self, job_id, result: AvailabilityResult):
        self.job_id = job_id
        self.result = result
        conflict_ids = [span.id for span in result.conflicts]
        subject = f"Job {job_id}" if job_id is not None else "New job"
        super().__init__(f"{subject} conflicts with jobs {conflict_ids}")


def load_job_spans(exclude_job_id: Optional[int] = None) -> List[JobSpan]:
    """
    Load every schedulable job as a span.

    Jobs are ordered by start date then id; this order is the lane
    tie-break in week layouts, so it must stay stable.

    Args:
        exclude_job_id: Leave one job out (used when rescheduling it)

    Returns:
        list: JobSpan for each job that has a start date
    """
    query = Job.query.filter(Job.start_date.isnot(None))
    if exclude_job_id is not None:
        query = query.filter(Job.id != exclude_job_id)
    jobs = query.order_by(Job.start_date.asc(), Job.id.asc()).all()
    return to_job_spans(jobs)


def get_month_view(
    month: date,
    today: date,
    selected: Optional[date] = None,
    proposed: Optional[ProposedSpan] = None,
    block_starts: bool = False
) -> MonthView:
    """Build the month view over all persisted jobs."""
    spans = load_job_spans()
    logger.debug("Building month view", month=month.isoformat(), jobs=len(spans))
    return build_month_view(
        month,
        spans,
        today=today,
        selected=selected,
        proposed=proposed,
        block_starts=block_starts,
    )


def get_day_detail(day: date) -> List[JobSpan]:
    """Jobs worked on a given day, for the day-detail panel."""
    return jobs_on_day(build_day_index(load_job_spans()), day)


def check_job_availability(
    proposed: ProposedSpan,
    horizon_days: int = SchedulingConfig.DEFAULT_HORIZON_DAYS,
    exclude_job_id: Optional[int] = None
) -> AvailabilityResult:
    """
    Check a proposed span against the stored calendar.

    Args:
        proposed: Booking being placed
        horizon_days: How far the next-available search may look ahead
        exclude_job_id: Job to ignore (the one being moved)

    Returns:
        AvailabilityResult with conflicts and an optional suggested start
    """
    result = check_availability(proposed, load_job_spans(exclude_job_id), horizon_days)
    logger.info(
        "Availability checked",
        start=proposed.start_day.isoformat(),
        duration_days=proposed.duration_working_units,
        include_weekends=proposed.include_weekends,
        is_free=result.is_free,
        conflicts=len(result.conflicts),
        suggested_start=result.suggested_start.isoformat() if result.suggested_start else None,
    )
    return result


def create_job(
    title: str,
    start_date: date,
    duration_days: int,
    include_weekends: bool,
    status: Optional[str] = None,
    force: bool = False,
    horizon_days: int = SchedulingConfig.DEFAULT_HORIZON_DAYS,
    commit: bool = True,
    **details
) -> Job:
    """
    Book a new job on the calendar.

    The end date is derived from the start, duration and weekend policy,
    the same way a reschedule derives it.

    Args:
        title: Job title
        start_date: First day of work
        duration_days: Duration in working days (coerced to at least 1)
        include_weekends: Whether weekends count toward the duration
        status: Initial status (defaults to 'scheduled')
        force: Save even if the span overlaps other jobs
        horizon_days: Search horizon for the suggestion attached to a conflict
        commit: Whether to commit the database transaction (default: True)
        **details: Other Job columns (client_name, site_address)

    Returns:
        Job: The new job record

    Raises:
        SchedulingConflictError: If the span overlaps another job and force is False
    """
    with OperationContext("create_job", title=title):
        if not force:
            result = check_job_availability(
                ProposedSpan(start_date, duration_days, include_weekends),
                horizon_days,
            )
            if not result.is_free:
                raise SchedulingConflictError(None, result)

        job = Job(
            title=title or "Job",
            status=status or SchedulingConfig.STATUS_SCHEDULED,
            **details,
            **reschedule_fields(start_date, duration_days, include_weekends),
        )
        db.session.add(job)

        if commit:
            db.session.commit()
        else:
            db.session.flush()

        logger.info(
            "Created job",
            job_id=job.id,
            start=job.start_date.isoformat(),
            end=job.end_date.isoformat(),
            duration_days=job.duration_days,
            forced=force,
        )

    return job


def reschedule_job(
    job: Job,
    start_date: date,
    duration_days: int,
    include_weekends: bool,
    force: bool = False,
    horizon_days: int = SchedulingConfig.DEFAULT_HORIZON_DAYS,
    commit: bool = True
) -> Job:
    """
    Move a job to a new start date, recomputing its end date.

    Args:
        job: Job model instance to update
        start_date: New first day
        duration_days: Duration in working days (coerced to at least 1)
        include_weekends: Whether weekends count toward the duration
        force: Save even if the new span overlaps other jobs
        horizon_days: Search horizon for the suggestion attached to a conflict
        commit: Whether to commit the database transaction (default: True)

    Returns:
        Job: Updated job record

    Raises:
        SchedulingConflictError: If the new span overlaps another job and force is False
    """
    with OperationContext("reschedule_job", job_id=job.id):
        proposed = ProposedSpan(start_date, duration_days, include_weekends)

        if not force:
            result = check_job_availability(proposed, horizon_days, exclude_job_id=job.id)
            if not result.is_free:
                raise SchedulingConflictError(job.id, result)

        fields = reschedule_fields(start_date, duration_days, include_weekends)
        old_start, old_end = job.start_date, job.end_date

        job.start_date = fields['start_date']
        job.duration_days = fields['duration_days']
        job.end_date = fields['end_date']
        job.include_weekends = fields['include_weekends']
        job.updated_at = datetime.utcnow()

        logger.info(
            "Rescheduled job",
            job_id=job.id,
            old_start=old_start.isoformat() if old_start else None,
            new_start=job.start_date.isoformat(),
            old_end=old_end.isoformat() if old_end else None,
            new_end=job.end_date.isoformat(),
            forced=force,
        )

        if commit:
            db.session.commit()

    return job
