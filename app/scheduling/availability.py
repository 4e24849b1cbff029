"""
Next-available start search.

A plain forward scan over calendar days. The horizon is at most a year and
the job list belongs to a single user, so no interval index is needed.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from app.scheduling.calendar import DateLike, at_midnight
from app.scheduling.config import SchedulingConfig
from app.scheduling.overlap import conflicting_jobs, is_free
from app.scheduling.spans import JobSpan, ProposedSpan

logger = logging.getLogger(__name__)


@dataclass
class AvailabilityResult:
    """Outcome of checking a proposed span against the calendar."""
    is_free: bool
    suggested_start: Optional[date] = None
    conflicts: List[JobSpan] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_free': self.is_free,
            'suggested_start': self.suggested_start.isoformat() if self.suggested_start else None,
            'conflicts': [job.to_dict() for job in self.conflicts],
        }


def next_available_start(
    seed: DateLike,
    duration_working_units: int,
    include_weekends: bool,
    all_jobs: Sequence[JobSpan],
    horizon_days: int = SchedulingConfig.DEFAULT_HORIZON_DAYS
) -> date:
    """
    Find the earliest start on or after `seed` with no conflicts.

    Candidates are seed, seed+1, ... seed+horizon_days-1 (horizon_days
    candidates, at least one). When none of them is free the seed is
    returned unchanged, so callers must re-check the result with is_free()
    to tell "found at seed" from "not found".

    Args:
        seed: First candidate start day
        duration_working_units: Length of the proposed job in working units
        include_weekends: Weekend policy of the proposed job
        all_jobs: Existing job spans
        horizon_days: How many candidate start days to check

    Returns:
        date: First conflict-free start, or the seed if none was found
    """
    seed_day = at_midnight(seed)
    proposal = ProposedSpan(seed_day, duration_working_units, include_weekends)

    for offset in range(max(1, horizon_days)):
        candidate = seed_day + timedelta(days=offset)
        if is_free(proposal.anchored_at(candidate), all_jobs):
            return candidate

    logger.debug("No free start within %s days of %s", horizon_days, seed_day)
    return seed_day


def check_availability(
    proposed: ProposedSpan,
    all_jobs: Sequence[JobSpan],
    horizon_days: int = SchedulingConfig.DEFAULT_HORIZON_DAYS
) -> AvailabilityResult:
    """
    Validate a proposal and, if it conflicts, suggest the next free start.

    suggested_start is only set when the proposal conflicts and the search
    found a different day that is actually free.
    """
    conflicts = conflicting_jobs(proposed, all_jobs)
    if not conflicts:
        return AvailabilityResult(is_free=True)

    candidate = next_available_start(
        proposed.start_day,
        proposed.duration_working_units,
        proposed.include_weekends,
        all_jobs,
        horizon_days,
    )
    suggestion = None
    if candidate != proposed.start_day and is_free(proposed.anchored_at(candidate), all_jobs):
        suggestion = candidate

    return AvailabilityResult(is_free=False, suggested_start=suggestion, conflicts=conflicts)
