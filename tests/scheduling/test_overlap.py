"""
Tests for overlap detection between spans with independent weekend policies.
"""
import itertools
import pytest
from datetime import date
from app.scheduling.overlap import (
    ranges_overlap,
    clamp_overlap,
    overlaps,
    is_free,
    conflicting_jobs,
    overlap_working_days,
)
from app.scheduling.spans import JobSpan, ProposedSpan


@pytest.fixture
def job_a():
    """Mon 3rd .. Fri 7th June 2024, weekdays only."""
    return JobSpan('A', date(2024, 6, 3), date(2024, 6, 7), include_weekends=False)


@pytest.fixture
def job_b():
    """Thu 6th .. Mon 10th June 2024, weekdays only: active Thu, Fri, Mon."""
    return JobSpan('B', date(2024, 6, 6), date(2024, 6, 10), include_weekends=False)


@pytest.fixture
def job_c():
    """Saturday 8th June 2024 only, weekends included."""
    return JobSpan('C', date(2024, 6, 8), date(2024, 6, 8), include_weekends=True)


class TestRanges:

    def test_touching_ranges_overlap(self):
        assert ranges_overlap(date(2024, 6, 3), date(2024, 6, 5), date(2024, 6, 5), date(2024, 6, 9))

    def test_disjoint_ranges(self):
        assert not ranges_overlap(date(2024, 6, 3), date(2024, 6, 4), date(2024, 6, 5), date(2024, 6, 9))

    def test_clamp_overlap_window(self):
        window = clamp_overlap(date(2024, 6, 3), date(2024, 6, 7), date(2024, 6, 5), date(2024, 6, 12))
        assert window == (date(2024, 6, 5), date(2024, 6, 7))

    def test_clamp_overlap_none(self):
        assert clamp_overlap(date(2024, 6, 3), date(2024, 6, 4), date(2024, 6, 6), date(2024, 6, 7)) is None


class TestOverlaps:

    def test_scenario_next_monday_is_free(self, job_a):
        proposed = ProposedSpan(date(2024, 6, 10), 1, False)
        assert is_free(proposed, [job_a]) is True

    def test_scenario_shared_friday_conflicts(self, job_a):
        proposed = ProposedSpan(date(2024, 6, 7), 1, False)
        assert is_free(proposed, [job_a]) is False

    def test_weekend_split_job_does_not_overlap_weekend_job(self, job_b, job_c):
        assert overlaps(job_b, job_c) is False

    def test_range_intersection_alone_would_be_wrong(self, job_b, job_c):
        assert ranges_overlap(job_b.start_day, job_b.end_day, job_c.start_day, job_c.end_day)
        assert not overlaps(job_b, job_c)

    def test_weekend_days_overlap_when_both_include_weekends(self):
        a = JobSpan('a', date(2024, 6, 6), date(2024, 6, 10), include_weekends=True)
        b = JobSpan('b', date(2024, 6, 9), date(2024, 6, 9), include_weekends=True)
        assert overlaps(a, b)

    def test_weekend_proposal_start_occupies_the_day(self):
        """A 1-unit proposal on Saturday still occupies Saturday."""
        weekend_job = JobSpan('w', date(2024, 6, 8), date(2024, 6, 9), include_weekends=True)
        proposed = ProposedSpan(date(2024, 6, 8), 1, False)
        assert overlaps(proposed, weekend_job)

    def test_proposal_skipping_weekend_misses_weekend_job(self):
        weekend_job = JobSpan('w', date(2024, 6, 8), date(2024, 6, 9), include_weekends=True)
        proposed = ProposedSpan(date(2024, 6, 7), 2, False)  # Fri, Mon
        assert not overlaps(proposed, weekend_job)

    def test_symmetry(self, job_a, job_b, job_c):
        spans = [
            job_a,
            job_b,
            job_c,
            ProposedSpan(date(2024, 6, 8), 1, False),
            ProposedSpan(date(2024, 6, 7), 2, False),
            ProposedSpan(date(2024, 6, 1), 10, True),
        ]
        for first, second in itertools.permutations(spans, 2):
            assert overlaps(first, second) == overlaps(second, first)

    def test_disjoint_jobs(self, job_a):
        later = JobSpan('L', date(2024, 7, 1), date(2024, 7, 5))
        assert not overlaps(job_a, later)


class TestIsFree:

    def test_empty_calendar_is_free(self):
        assert is_free(ProposedSpan(date(2024, 6, 3), 5), [])

    def test_conflicting_jobs_in_input_order(self, job_a, job_b, job_c):
        proposed = ProposedSpan(date(2024, 6, 6), 2, True)  # Thu, Fri
        assert [job.id for job in conflicting_jobs(proposed, [job_c, job_b, job_a])] == ['B', 'A']


class TestOverlapWorkingDays:

    def test_weekday_job_in_period(self, job_b):
        assert overlap_working_days(job_b, date(2024, 6, 1), date(2024, 6, 30)) == 3

    def test_partial_period(self, job_b):
        assert overlap_working_days(job_b, date(2024, 6, 7), date(2024, 6, 9)) == 1

    def test_weekend_job_counts_weekend(self):
        span = JobSpan('x', date(2024, 6, 6), date(2024, 6, 10), include_weekends=True)
        assert overlap_working_days(span, date(2024, 6, 7), date(2024, 6, 9)) == 3

    def test_outside_period(self, job_a):
        assert overlap_working_days(job_a, date(2024, 7, 1), date(2024, 7, 31)) == 0
