"""
Helper functions for reading scheduling inputs from API requests.
"""
from typing import Any, Dict, Optional

from app.datetime_utils import parse_flag, parse_ymd
from app.scheduling.spans import ProposedSpan


def parse_duration(value: Any) -> int:
    """
    Read a duration in working days.

    Raises:
        ValueError: If the value is not a whole number >= 1
    """
    if value is None or value == "":
        return 1
    if isinstance(value, bool):
        raise ValueError("duration_days must be a whole number of days")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError("duration_days must be a whole number of days")
    if number != int(number) or number < 1:
        raise ValueError("duration_days must be a whole number >= 1")
    return int(number)


def parse_horizon(value: Any, default: int) -> int:
    """Read an optional search horizon, bounded to 1..365 days."""
    if value is None or value == "":
        return default
    try:
        horizon = int(value)
    except (TypeError, ValueError):
        raise ValueError("horizon_days must be an integer")
    if horizon < 1 or horizon > 365:
        raise ValueError("horizon_days must be between 1 and 365")
    return horizon


def proposal_from_payload(
    payload: Dict[str, Any],
    start_field: str = 'start',
    required: bool = True
) -> Optional[ProposedSpan]:
    """
    Build a ProposedSpan from a JSON body or query-string mapping.

    Accepts 'days' as an alias of 'duration_days' (calendar query strings).

    Returns:
        ProposedSpan, or None when the start is missing and not required

    Raises:
        ValueError: On a missing required start or malformed values
    """
    start = parse_ymd(payload.get(start_field))
    if start is None:
        if required:
            raise ValueError(f"{start_field} is required")
        return None

    duration = payload.get('duration_days', payload.get('days'))
    return ProposedSpan(
        start=start,
        duration_working_units=parse_duration(duration),
        include_weekends=parse_flag(payload.get('include_weekends')),
    )
