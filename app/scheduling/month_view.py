"""
Month view assembly.

Combines the month grid, the day index and per-week band layouts into the
render instructions a calendar client draws. The caller owns the month
cursor, "today" and the current selection and passes them in on every call.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from app.scheduling.calendar import DateLike, at_midnight, month_grid
from app.scheduling.day_index import badge_status, build_day_index, day_key
from app.scheduling.spans import JobSpan, ProposedSpan
from app.scheduling.week_layout import (
    Segment,
    WeekLayout,
    build_week_layout,
    jobs_in_week,
    proposed_segments,
)


@dataclass
class DayCell:
    date: date
    key: str
    in_month: bool
    is_today: bool
    is_selected: bool
    job_ids: List[Any] = field(default_factory=list)
    badge_status: Optional[str] = None
    blocked: bool = False

    @property
    def job_count(self) -> int:
        return len(self.job_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'key': self.key,
            'in_month': self.in_month,
            'is_today': self.is_today,
            'is_selected': self.is_selected,
            'job_ids': list(self.job_ids),
            'job_count': self.job_count,
            'badge_status': self.badge_status,
            'blocked': self.blocked,
        }


@dataclass
class WeekRow:
    days: List[DayCell]
    layout: WeekLayout
    proposal: List[Segment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'days': [cell.to_dict() for cell in self.days],
            'bands': self.layout.to_dict(),
            'proposal_segments': [list(segment) for segment in self.proposal],
        }


@dataclass
class MonthView:
    month: date
    weeks: List[WeekRow]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'month': self.month.strftime('%Y-%m'),
            'weeks': [week.to_dict() for week in self.weeks],
        }


def build_month_view(
    month: DateLike,
    spans: Sequence[JobSpan],
    today: DateLike,
    selected: Optional[DateLike] = None,
    proposed: Optional[ProposedSpan] = None,
    block_starts: bool = False
) -> MonthView:
    """
    Build render instructions for one month.

    Args:
        month: Any day in the month to show
        spans: All job spans (jobs outside the grid are ignored)
        today: The caller's current day
        selected: Currently selected day, if any
        proposed: Booking being placed, highlighted per week
        block_starts: Mark days that already have jobs as blocked start days
                      while a proposal is being placed

    Returns:
        MonthView with six week rows
    """
    month_day = at_midnight(month).replace(day=1)
    today_day = at_midnight(today)
    selected_day = at_midnight(selected) if selected else None
    index = build_day_index(spans)
    blocking = bool(block_starts and proposed is not None)

    weeks = []
    for week_days in month_grid(month_day):
        cells = []
        for day in week_days:
            key = day_key(day)
            on_day = index.get(key, [])
            cells.append(DayCell(
                date=day,
                key=key,
                in_month=day.month == month_day.month,
                is_today=day == today_day,
                is_selected=day == selected_day,
                job_ids=[job.id for job in on_day],
                badge_status=badge_status(on_day) if on_day else None,
                blocked=blocking and bool(on_day),
            ))

        weeks.append(WeekRow(
            days=cells,
            layout=build_week_layout(week_days, jobs_in_week(week_days, spans)),
            proposal=proposed_segments(week_days, proposed),
        ))

    return MonthView(month=month_day, weeks=weeks)
