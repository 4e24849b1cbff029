"""
Scheduling configuration module.

Fixed parameters shared by every calendar computation. The HTTP layer may
override the search horizon per request; everything else is constant.
"""

from typing import Dict, Tuple


class SchedulingConfig:
    """
    Configuration for calendar and availability calculations.

    Values here define render parity with the mobile calendar, so the
    lane cap and badge priority must not drift between consumers.
    """

    # How far ahead (in calendar days) the next-available search scans
    DEFAULT_HORIZON_DAYS: int = 365

    # Week rows draw at most this many band lanes
    MAX_VISIBLE_LANES: int = 3

    # Canonical statuses
    STATUS_SCHEDULED: str = 'scheduled'
    STATUS_IN_PROGRESS: str = 'in_progress'
    STATUS_COMPLETE: str = 'complete'

    # Legacy aliases mapped onto canonical statuses after normalization
    STATUS_ALIASES: Dict[str, str] = {
        'open': 'scheduled',
    }

    # Day badge priority, first match wins
    BADGE_PRIORITY: Tuple[str, ...] = ('in_progress', 'complete')

    # Status palette (hex) used for bands and badges
    STATUS_COLORS: Dict[str, str] = {
        'scheduled': '#2a86ff',
        'in_progress': '#f59e0b',
        'complete': '#16a34a',
    }

    @classmethod
    def get_status_color(cls, status: str) -> str:
        """
        Get the palette color for a normalized status.

        Returns the scheduled color for unknown statuses.
        """
        return cls.STATUS_COLORS.get(status, cls.STATUS_COLORS[cls.STATUS_SCHEDULED])
