"""
Job span model.

Converts persisted job records (model instances or plain dicts) into
read-only spans the rest of the engine works with, and describes proposed
bookings that have not been saved yet.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from app.scheduling.calendar import DateLike, advance_by_working_units, at_midnight, is_active_day
from app.scheduling.config import SchedulingConfig

logger = logging.getLogger(__name__)

_STATUS_SEPARATORS = re.compile(r'[\s-]+')
_TRUE_STRINGS = {'1', 'true', 't', 'yes', 'y', 'on'}


def normalize_status(status: Optional[str]) -> str:
    """
    Normalize a free-form job status.

    Lowercases, trims and collapses whitespace/hyphen runs to underscores.
    Empty values and the legacy 'open' become 'scheduled'.
    """
    cleaned = _STATUS_SEPARATORS.sub('_', str(status or '').strip().lower())
    if not cleaned:
        return SchedulingConfig.STATUS_SCHEDULED
    return SchedulingConfig.STATUS_ALIASES.get(cleaned, cleaned)


def coerce_bool(value: Any) -> bool:
    """Interpret a stored flag; strings like 'false' or '0' are False."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


@dataclass(frozen=True)
class JobSpan:
    """Scheduling view of a persisted job."""
    id: Any
    start_day: date
    end_day: date
    include_weekends: bool = False
    status: str = SchedulingConfig.STATUS_SCHEDULED
    title: Optional[str] = field(default=None, compare=False)

    def contains(self, day: date) -> bool:
        return self.start_day <= day <= self.end_day

    def is_active(self, day: DateLike) -> bool:
        """True if the job is worked on `day` under its own weekend policy."""
        day = at_midnight(day)
        return self.contains(day) and is_active_day(day, self.include_weekends)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'start_date': self.start_day.isoformat(),
            'end_date': self.end_day.isoformat(),
            'include_weekends': self.include_weekends,
            'status': self.status,
        }


@dataclass(frozen=True)
class ProposedSpan:
    """
    A booking being placed by the user.

    The end day is always derived from the start and duration; it is never
    an independent input. The start day is occupied even when it is a
    weekend the proposal would otherwise skip.
    """
    start: date
    duration_working_units: int = 1
    include_weekends: bool = False
    end: date = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'start', at_midnight(self.start))
        try:
            units = int(self.duration_working_units or 1)
        except (TypeError, ValueError):
            units = 1
        object.__setattr__(self, 'duration_working_units', max(1, units))
        object.__setattr__(self, 'include_weekends', coerce_bool(self.include_weekends))
        object.__setattr__(
            self, 'end',
            advance_by_working_units(self.start, self.duration_working_units, self.include_weekends),
        )

    @property
    def start_day(self) -> date:
        return self.start

    @property
    def end_day(self) -> date:
        return self.end

    def contains(self, day: date) -> bool:
        return self.start_day <= day <= self.end_day

    def is_active(self, day: DateLike) -> bool:
        day = at_midnight(day)
        if day == self.start:
            return True
        return self.contains(day) and is_active_day(day, self.include_weekends)

    def anchored_at(self, start: DateLike) -> 'ProposedSpan':
        """Same duration and weekend policy, different start day."""
        return ProposedSpan(start, self.duration_working_units, self.include_weekends)


Span = Union[JobSpan, ProposedSpan]


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def to_job_span(record: Any) -> Optional[JobSpan]:
    """
    Map a job record to a JobSpan.

    Args:
        record: dict or object exposing start_date, end_date, include_weekends,
                status, id and (optionally) title

    Returns:
        JobSpan, or None if the record has no usable start date. A missing
        end date defaults to the start day and an end date before the start
        collapses the span to its start day.
    """
    if record is None:
        return None

    raw_start = _field(record, 'start_date')
    if not raw_start:
        return None

    try:
        start_day = at_midnight(raw_start)
        raw_end = _field(record, 'end_date')
        end_day = at_midnight(raw_end) if raw_end else start_day
    except (TypeError, ValueError) as exc:
        logger.debug("Ignoring job with unreadable dates: id=%s error=%s", _field(record, 'id'), exc)
        return None

    if end_day < start_day:
        logger.debug("Clamping job %s with end before start to a single day", _field(record, 'id'))
        end_day = start_day

    return JobSpan(
        id=_field(record, 'id'),
        start_day=start_day,
        end_day=end_day,
        include_weekends=coerce_bool(_field(record, 'include_weekends', False)),
        status=normalize_status(_field(record, 'status')),
        title=_field(record, 'title'),
    )


def to_job_spans(records: Iterable[Any]) -> List[JobSpan]:
    """Convert records to spans, dropping the scheduling-invisible ones (input order kept)."""
    spans = []
    for record in records or []:
        span = record if isinstance(record, JobSpan) else to_job_span(record)
        if span is not None:
            spans.append(span)
    return spans


def active_days(span: Span) -> Iterator[date]:
    """Lazily yield the days a span is worked, in date order."""
    day = span.start_day
    end = span.end_day
    while day <= end:
        if span.is_active(day):
            yield day
        day += timedelta(days=1)


def reschedule_fields(start: DateLike, duration_days: Any, include_weekends: Any) -> Dict[str, Any]:
    """
    Compute the persisted schedule fields for a job placed at `start`.

    Returns:
        dict: start_date, duration_days, end_date and include_weekends
    """
    proposed = ProposedSpan(start, duration_days, include_weekends)
    return {
        'start_date': proposed.start_day,
        'duration_days': proposed.duration_working_units,
        'end_date': proposed.end_day,
        'include_weekends': proposed.include_weekends,
    }
