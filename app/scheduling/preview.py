"""
Text preview of the job calendar for operators.

Renders a month view as plain text (day numbers, job counts and lane
bands) and reports the next available start for a proposed booking,
without changing the database.
"""

from datetime import date, datetime
from typing import List, Optional

from app.scheduling.availability import check_availability
from app.scheduling.config import SchedulingConfig
from app.scheduling.month_view import MonthView, build_month_view
from app.scheduling.service import load_job_spans
from app.scheduling.spans import ProposedSpan
from app.logging_config import get_logger

logger = get_logger(__name__)

WEEKDAY_HEADER = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
CELL_WIDTH = 6
STATUS_GLYPHS = {
    'scheduled': '=',
    'in_progress': '~',
    'complete': '#',
}


def format_date(d: Optional[date]) -> str:
    """Format a date for display, or 'None' if None."""
    if d is None:
        return 'None'
    return d.isoformat()


def _band_line(lane: int, week) -> str:
    cells = [' ' * CELL_WIDTH] * 7
    for band in week.layout.ranges:
        if band.lane != lane:
            continue
        glyph = STATUS_GLYPHS.get(band.status, '=')
        for col in range(band.start_col, band.end_col + 1):
            cells[col] = glyph * CELL_WIDTH
    return ''.join(cells)


def format_month(view: MonthView) -> List[str]:
    """
    Render a month view as text lines.

    Each week shows day numbers (bracketed for today, '*' when the day has
    jobs, '!' when blocked) followed by one line per band lane.
    """
    lines = [view.month.strftime('%B %Y'), ''.join(h.ljust(CELL_WIDTH) for h in WEEKDAY_HEADER)]
    for week in view.weeks:
        cells = []
        for cell in week.days:
            label = f"{cell.date.day:2d}" if cell.in_month else "  "
            if cell.is_today:
                label = f"[{label}]"
            if cell.job_count:
                label += '*'
            if cell.blocked:
                label += '!'
            cells.append(label.ljust(CELL_WIDTH))
        lines.append(''.join(cells).rstrip())
        for lane in range(week.layout.lane_count):
            lines.append(_band_line(lane, week).rstrip())
    return lines


def print_preview(view: MonthView, availability=None, proposed: Optional[ProposedSpan] = None):
    """Print the month view and, if given, the availability outcome."""
    print("\n" + "=" * 60)
    for line in format_month(view):
        print(line)

    if availability is None or proposed is None:
        print("=" * 60)
        return

    print("-" * 60)
    print(f"Proposed start: {format_date(proposed.start_day)}  "
          f"end: {format_date(proposed.end_day)}  "
          f"days: {proposed.duration_working_units}  "
          f"weekends: {'yes' if proposed.include_weekends else 'no'}")
    if availability.is_free:
        print("  ✓  Slot is free")
    else:
        blockers = ', '.join(str(span.title or span.id) for span in availability.conflicts)
        print(f"  ⚠️  Conflicts with: {blockers}")
        if availability.suggested_start:
            print(f"  Next available start: {format_date(availability.suggested_start)}")
        else:
            print("  No availability found within the search horizon")
    print("=" * 60)


def run_preview_script(
    month_str: Optional[str] = None,
    propose_start_str: Optional[str] = None,
    days: int = 1,
    include_weekends: bool = False,
    horizon_days: int = SchedulingConfig.DEFAULT_HORIZON_DAYS
):
    """
    Run the calendar preview from the command line.

    Args:
        month_str: Month to show (YYYY-MM), defaults to the current month
        propose_start_str: Optional proposed start (YYYY-MM-DD)
        days: Proposed duration in working days
        include_weekends: Proposed weekend policy
        horizon_days: Search horizon for the next available start
    """
    today = date.today()
    month = today.replace(day=1)
    if month_str:
        try:
            month = datetime.strptime(month_str, '%Y-%m').date()
        except ValueError:
            print(f"Warning: Invalid month '{month_str}', using current month")

    proposed = None
    if propose_start_str:
        try:
            proposed = ProposedSpan(date.fromisoformat(propose_start_str), days, include_weekends)
        except ValueError:
            print(f"Warning: Invalid proposed start '{propose_start_str}', ignoring proposal")

    try:
        spans = load_job_spans()
        view = build_month_view(month, spans, today=today, proposed=proposed, block_starts=proposed is not None)
        availability = check_availability(proposed, spans, horizon_days) if proposed else None
        print_preview(view, availability, proposed)
        return view, availability
    except Exception as e:
        logger.error(f"Error in preview script: {e}", exc_info=True)
        print(f"\nError: {e}")
        raise
