"""
Tests for week band layout: weekend splitting and greedy lane packing.
"""
import pytest
from datetime import date, timedelta
from app.scheduling.week_layout import (
    WeekLayout,
    active_columns,
    compress_segments,
    jobs_in_week,
    build_week_layout,
    proposed_segments,
)
from app.scheduling.config import SchedulingConfig
from app.scheduling.spans import JobSpan, ProposedSpan


def week_of(first_day):
    return [first_day + timedelta(days=i) for i in range(7)]


# Mon 3rd .. Sun 9th June 2024
WEEK = week_of(date(2024, 6, 3))


def job(job_id, start_col, end_col, include_weekends=False, status='scheduled'):
    """A job spanning WEEK[start_col]..WEEK[end_col]."""
    return JobSpan(job_id, WEEK[start_col], WEEK[end_col], include_weekends, status)


def max_simultaneous(week, spans):
    return max(sum(1 for span in spans if span.is_active(day)) for day in week)


class TestCompressSegments:

    def test_single_run(self):
        assert compress_segments([False, True, True, True, False, False, False]) == [(1, 3)]

    def test_multiple_runs(self):
        assert compress_segments([True, True, False, False, True, False, True]) == [(0, 1), (4, 4), (6, 6)]

    def test_run_to_end(self):
        assert compress_segments([False] * 5 + [True, True]) == [(5, 6)]

    def test_all_and_none(self):
        assert compress_segments([True] * 7) == [(0, 6)]
        assert compress_segments([False] * 7) == []


class TestActiveColumns:

    def test_weekday_job_stops_at_friday(self):
        span = JobSpan(1, date(2024, 6, 1), date(2024, 6, 20), include_weekends=False)
        assert active_columns(WEEK, span) == [True] * 5 + [False, False]

    def test_weekend_job_fills_week(self):
        span = JobSpan(1, date(2024, 6, 1), date(2024, 6, 20), include_weekends=True)
        assert active_columns(WEEK, span) == [True] * 7

    def test_job_split_around_weekend(self):
        """Thu..Mon excluding weekends becomes Thu-Fri and Mon segments."""
        days = week_of(date(2024, 6, 6))  # Thu .. Wed
        span = JobSpan(1, date(2024, 6, 6), date(2024, 6, 10), include_weekends=False)
        assert compress_segments(active_columns(days, span)) == [(0, 1), (4, 4)]

    def test_job_spanning_weekend_splits_across_weeks(self):
        span = JobSpan(1, date(2024, 6, 6), date(2024, 6, 10), include_weekends=False)
        first = build_week_layout(WEEK, [span])
        second = build_week_layout(week_of(date(2024, 6, 10)), [span])
        assert [(b.start_col, b.end_col) for b in first.ranges] == [(3, 4)]
        assert [(b.start_col, b.end_col) for b in second.ranges] == [(0, 0)]


class TestLanePacking:

    def test_single_job(self):
        layout = build_week_layout(WEEK, [job('a', 0, 2)])
        assert [(b.job_id, b.lane) for b in layout.ranges] == [('a', 0)]
        assert layout.lane_count == 1

    def test_no_jobs(self):
        layout = build_week_layout(WEEK, [])
        assert layout == WeekLayout(ranges=[], lane_count=1)

    def test_staggered_three_jobs(self):
        """Mon-Wed, Tue-Thu, Wed-Fri: all three share Wednesday."""
        spans = [job('a', 0, 2), job('b', 1, 3), job('c', 2, 4)]
        layout = build_week_layout(WEEK, spans)
        assert [(b.job_id, b.start_col, b.end_col, b.lane) for b in layout.ranges] == [
            ('a', 0, 2, 0),
            ('b', 1, 3, 1),
            ('c', 2, 4, 2),
        ]
        assert layout.lane_count == 3
        assert layout.lane_count == max_simultaneous(WEEK, spans)

    def test_lane_reused_after_job_ends(self):
        spans = [job('a', 0, 1), job('b', 2, 4), job('c', 1, 2)]
        layout = build_week_layout(WEEK, spans)
        assert [(b.job_id, b.lane) for b in layout.ranges] == [('a', 0), ('b', 0), ('c', 1)]
        assert layout.lane_count == 2
        assert layout.lane_count == max_simultaneous(WEEK, spans)

    def test_lane_must_end_strictly_before_start(self):
        """A lane ending on the same column is not free."""
        layout = build_week_layout(WEEK, [job('a', 0, 2), job('b', 2, 3)])
        assert [b.lane for b in layout.ranges] == [0, 1]

    def test_segments_of_one_job_share_lane_bookkeeping(self):
        days = week_of(date(2024, 6, 6))  # Thu .. Wed
        split = JobSpan('s', date(2024, 6, 6), date(2024, 6, 10), include_weekends=False)
        filler = JobSpan('f', date(2024, 6, 11), date(2024, 6, 12), include_weekends=False)
        layout = build_week_layout(days, [split, filler])
        assert [(b.job_id, b.start_col, b.end_col, b.lane) for b in layout.ranges] == [
            ('s', 0, 1, 0),
            ('s', 4, 4, 0),
            ('f', 5, 6, 0),
        ]

    def test_overflow_lanes_hidden_but_counted(self):
        spans = [job(name, 0, 4) for name in 'abcd']
        layout = build_week_layout(WEEK, spans)
        assert [b.job_id for b in layout.ranges] == ['a', 'b', 'c']
        assert all(b.lane <= 2 for b in layout.ranges)
        assert layout.lane_count == SchedulingConfig.MAX_VISIBLE_LANES

    def test_overflow_lane_still_blocks_columns(self):
        spans = [job('a', 0, 4), job('b', 0, 4), job('c', 0, 4), job('d', 0, 1), job('e', 2, 3)]
        layout = build_week_layout(WEEK, spans)
        # d takes hidden lane 3 (ends col 1); e reuses lane 3 after d
        assert [b.job_id for b in layout.ranges] == ['a', 'b', 'c']
        assert layout.lane_count == 3

    def test_input_order_is_the_tie_break(self):
        first = build_week_layout(WEEK, [job('x', 0, 2), job('y', 0, 2)])
        second = build_week_layout(WEEK, [job('y', 0, 2), job('x', 0, 2)])
        assert [(b.job_id, b.lane) for b in first.ranges] == [('x', 0), ('y', 1)]
        assert [(b.job_id, b.lane) for b in second.ranges] == [('y', 0), ('x', 1)]

    def test_layout_is_reproducible(self):
        spans = [job('a', 0, 3), job('b', 2, 6, include_weekends=True), job('c', 4, 4)]
        assert build_week_layout(WEEK, spans) == build_week_layout(WEEK, spans)

    def test_band_color_from_status(self):
        layout = build_week_layout(WEEK, [job('a', 0, 1, status='in_progress'), job('b', 3, 4, status='on_hold')])
        assert layout.ranges[0].color == SchedulingConfig.STATUS_COLORS['in_progress']
        assert layout.ranges[1].color == SchedulingConfig.STATUS_COLORS['scheduled']

    def test_rejects_wrong_week_length(self):
        with pytest.raises(ValueError):
            build_week_layout(WEEK[:6], [])

    def test_to_dict(self):
        layout = build_week_layout(WEEK, [job('a', 1, 2)])
        assert layout.to_dict() == {
            'ranges': [{
                'job_id': 'a',
                'start_col': 1,
                'end_col': 2,
                'lane': 0,
                'status': 'scheduled',
                'color': SchedulingConfig.STATUS_COLORS['scheduled'],
            }],
            'lane_count': 1,
        }


class TestJobsInWeek:

    def test_filters_by_raw_range(self):
        spans = [
            JobSpan('before', date(2024, 5, 27), date(2024, 6, 2)),
            JobSpan('touching', date(2024, 6, 9), date(2024, 6, 12)),
            JobSpan('after', date(2024, 6, 10), date(2024, 6, 12)),
            JobSpan('inside', date(2024, 6, 4), date(2024, 6, 4)),
        ]
        assert [span.id for span in jobs_in_week(WEEK, spans)] == ['touching', 'inside']


class TestProposedSegments:

    def test_none(self):
        assert proposed_segments(WEEK, None) == []

    def test_proposal_crossing_weekend(self):
        proposed = ProposedSpan(date(2024, 6, 7), 2, False)  # Fri, Mon
        assert proposed_segments(WEEK, proposed) == [(4, 4)]
        assert proposed_segments(week_of(date(2024, 6, 10)), proposed) == [(0, 0)]

    def test_weekend_start_is_highlighted(self):
        proposed = ProposedSpan(date(2024, 6, 8), 1, False)
        assert proposed_segments(WEEK, proposed) == [(5, 5)]
