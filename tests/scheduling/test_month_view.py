"""
Tests for month view assembly (grid cells, badges, bands and proposals).
"""
from datetime import date
from app.scheduling.month_view import build_month_view
from app.scheduling.spans import JobSpan, ProposedSpan


def make_spans():
    return [
        JobSpan(1, date(2024, 6, 3), date(2024, 6, 7), include_weekends=False, status='scheduled'),
        JobSpan(2, date(2024, 6, 5), date(2024, 6, 5), include_weekends=False, status='in_progress'),
        JobSpan(3, date(2024, 6, 6), date(2024, 6, 10), include_weekends=False, status='complete'),
    ]


def cell(view, day):
    for week in view.weeks:
        for c in week.days:
            if c.date == day:
                return c
    raise AssertionError(f"{day} not in grid")


class TestBuildMonthView:

    def test_six_weeks_of_seven_days(self):
        view = build_month_view(date(2024, 6, 20), make_spans(), today=date(2024, 6, 4))
        assert view.month == date(2024, 6, 1)
        assert len(view.weeks) == 6
        assert all(len(week.days) == 7 for week in view.weeks)

    def test_in_month_flags(self):
        view = build_month_view(date(2024, 6, 1), [], today=date(2024, 6, 4))
        assert cell(view, date(2024, 5, 31)).in_month is False
        assert cell(view, date(2024, 6, 1)).in_month is True

    def test_today_and_selected(self):
        view = build_month_view(date(2024, 6, 1), [], today=date(2024, 6, 4), selected=date(2024, 6, 12))
        assert cell(view, date(2024, 6, 4)).is_today is True
        assert cell(view, date(2024, 6, 12)).is_selected is True
        assert cell(view, date(2024, 6, 13)).is_selected is False

    def test_day_counts_and_badges(self):
        view = build_month_view(date(2024, 6, 1), make_spans(), today=date(2024, 6, 4))
        wednesday = cell(view, date(2024, 6, 5))
        assert wednesday.job_ids == [1, 2]
        assert wednesday.job_count == 2
        assert wednesday.badge_status == 'in_progress'

        friday = cell(view, date(2024, 6, 7))
        assert friday.job_ids == [1, 3]
        assert friday.badge_status == 'complete'

        saturday = cell(view, date(2024, 6, 8))
        assert saturday.job_count == 0
        assert saturday.badge_status is None

    def test_week_bands(self):
        view = build_month_view(date(2024, 6, 1), make_spans(), today=date(2024, 6, 4))
        # Second grid row is Mon 3rd .. Sun 9th
        layout = view.weeks[1].layout
        assert [(b.job_id, b.start_col, b.end_col, b.lane) for b in layout.ranges] == [
            (1, 0, 4, 0),
            (2, 2, 2, 1),
            (3, 3, 4, 1),
        ]
        assert layout.lane_count == 2

        next_week = view.weeks[2].layout
        assert [(b.job_id, b.start_col, b.end_col) for b in next_week.ranges] == [(3, 0, 0)]

    def test_blocked_days_only_while_placing(self):
        spans = make_spans()
        proposed = ProposedSpan(date(2024, 6, 12), 2, False)

        view = build_month_view(date(2024, 6, 1), spans, today=date(2024, 6, 4), proposed=proposed, block_starts=True)
        assert cell(view, date(2024, 6, 5)).blocked is True
        assert cell(view, date(2024, 6, 12)).blocked is False

        without_proposal = build_month_view(date(2024, 6, 1), spans, today=date(2024, 6, 4), block_starts=True)
        assert cell(without_proposal, date(2024, 6, 5)).blocked is False

    def test_proposal_segments(self):
        proposed = ProposedSpan(date(2024, 6, 14), 2, False)  # Fri 14th, Mon 17th
        view = build_month_view(date(2024, 6, 1), [], today=date(2024, 6, 4), proposed=proposed)
        assert view.weeks[2].proposal == [(4, 4)]
        assert view.weeks[3].proposal == [(0, 0)]
        assert view.weeks[1].proposal == []

    def test_to_dict_shape(self):
        view = build_month_view(date(2024, 6, 1), make_spans(), today=date(2024, 6, 4))
        body = view.to_dict()
        assert body['month'] == '2024-06'
        assert len(body['weeks']) == 6
        first_week = body['weeks'][1]
        assert first_week['days'][0]['key'] == '2024-06-03'
        assert first_week['bands']['lane_count'] == 2
        assert first_week['proposal_segments'] == []
