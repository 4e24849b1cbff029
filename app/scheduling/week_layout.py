"""
Week band layout.

Turns the jobs of one calendar week into horizontal bands. A job that
skips weekends is split into separate segments around the weekend, and all
segments of the week are packed greedily into lanes so that no two bands
in the same lane share a column.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.scheduling.calendar import DAYS_PER_WEEK, DateLike, at_midnight
from app.scheduling.config import SchedulingConfig
from app.scheduling.spans import JobSpan, ProposedSpan, Span

logger = logging.getLogger(__name__)

Segment = Tuple[int, int]


@dataclass(frozen=True)
class WeekBand:
    """One drawable band: a contiguous run of columns in a lane."""
    job_id: Any
    start_col: int
    end_col: int
    lane: int
    status: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'job_id': self.job_id,
            'start_col': self.start_col,
            'end_col': self.end_col,
            'lane': self.lane,
            'status': self.status,
            'color': self.color,
        }


@dataclass
class WeekLayout:
    ranges: List[WeekBand] = field(default_factory=list)
    lane_count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ranges': [band.to_dict() for band in self.ranges],
            'lane_count': self.lane_count,
        }


def active_columns(week_days: Sequence[DateLike], span: Span) -> List[bool]:
    """Per-column flag: is the span worked on that day of the week?"""
    return [span.is_active(day) for day in week_days]


def compress_segments(active: Sequence[bool]) -> List[Segment]:
    """
    Compress a column mask into maximal runs of True.

    Returns:
        list of (start_col, end_col) pairs, inclusive, in column order
    """
    segments: List[Segment] = []
    run_start: Optional[int] = None
    for col, is_on in enumerate(active):
        if is_on and run_start is None:
            run_start = col
        elif not is_on and run_start is not None:
            segments.append((run_start, col - 1))
            run_start = None
    if run_start is not None:
        segments.append((run_start, len(active) - 1))
    return segments


def jobs_in_week(week_days: Sequence[DateLike], spans: Sequence[JobSpan]) -> List[JobSpan]:
    """Spans whose raw date range touches the week (input order kept)."""
    first = at_midnight(week_days[0])
    last = at_midnight(week_days[-1])
    return [span for span in spans if span.end_day >= first and span.start_day <= last]


def _assign_lane(lane_ends: List[int], segment: Segment) -> int:
    start_col, end_col = segment
    for lane, last_col in enumerate(lane_ends):
        if last_col < start_col:
            lane_ends[lane] = end_col
            return lane
    lane_ends.append(end_col)
    return len(lane_ends) - 1


def build_week_layout(week_days: Sequence[DateLike], spans: Sequence[JobSpan]) -> WeekLayout:
    """
    Lay out the jobs of one week as lane-packed bands.

    Jobs are processed in the order given and each job's segments left to
    right; this order is the tie-break, so identical input always yields
    identical lanes. Each segment takes the lowest lane whose last used
    column is before the segment's first column, or opens a new lane.
    Segments on lanes beyond the visible cap still reserve their lane but
    are not returned.

    Args:
        week_days: The 7 days of the week, Monday first
        spans: Jobs to lay out (spans outside the week simply produce no segments)

    Returns:
        WeekLayout with the visible bands and the lane count (1..3)
    """
    if len(week_days) != DAYS_PER_WEEK:
        raise ValueError(f"A week has {DAYS_PER_WEEK} days, got {len(week_days)}")

    max_lanes = SchedulingConfig.MAX_VISIBLE_LANES
    lane_ends: List[int] = []
    ranges: List[WeekBand] = []

    for span in spans:
        for segment in compress_segments(active_columns(week_days, span)):
            lane = _assign_lane(lane_ends, segment)
            if lane >= max_lanes:
                logger.debug("Band for job %s overflows to hidden lane %s", span.id, lane)
                continue
            ranges.append(WeekBand(
                job_id=span.id,
                start_col=segment[0],
                end_col=segment[1],
                lane=lane,
                status=span.status,
                color=SchedulingConfig.get_status_color(span.status),
            ))

    lane_count = min(max_lanes, max(1, len(lane_ends)))
    return WeekLayout(ranges=ranges, lane_count=lane_count)


def proposed_segments(week_days: Sequence[DateLike], proposed: Optional[ProposedSpan]) -> List[Segment]:
    """Column runs of a proposed span inside the week, for highlighting."""
    if proposed is None:
        return []
    return compress_segments(active_columns(week_days, proposed))
