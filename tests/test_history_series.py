"""Tests for the weekly chart and timeline mood series."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from habitlens.constants.moods import NO_MOOD
from habitlens.services.dates import day_window, days_between, format_day, parse_day
from habitlens.services.history import (
    MoodRecord,
    average_mood,
    build_history_aggregate,
    build_timeline_series,
    build_weekly_series,
)

TODAY = date(2024, 3, 15)  # a Friday


def rec(days_back: int, score: int) -> MoodRecord:
    return MoodRecord(day=TODAY - timedelta(days=days_back), score=score)


class TestDayHelpers:
    def test_parse_and_format_round_trip(self):
        assert parse_day("2024-03-15") == TODAY
        assert format_day(TODAY) == "2024-03-15"

    def test_day_window_is_ascending_and_inclusive(self):
        window = day_window(TODAY, 7)
        assert window[0] == date(2024, 3, 9)
        assert window[-1] == TODAY
        assert len(window) == 7

    def test_days_between_rejects_reversed_window(self):
        with pytest.raises(ValueError):
            days_between(TODAY, TODAY - timedelta(days=1))

    def test_day_window_rejects_empty_window(self):
        with pytest.raises(ValueError):
            day_window(TODAY, 0)


class TestWeeklySeries:
    """The chart always has exactly seven points."""

    @pytest.mark.parametrize("count", [0, 3, 10])
    def test_always_seven_values(self, count):
        records = [rec(n, (n % 5) + 1) for n in range(count)]
        series = build_weekly_series(records, TODAY)

        assert len(series.labels) == 7
        assert len(series.values) == 7
        assert None not in series.values

    def test_labels_are_weekdays_ending_at_window_end(self):
        series = build_weekly_series([], TODAY)
        assert series.labels == ["Sat", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri"]
        assert series.points[-1].day == TODAY

    def test_missing_days_use_sentinel(self):
        series = build_weekly_series([rec(0, 2), rec(3, 5)], TODAY)
        assert series.values == [NO_MOOD, NO_MOOD, NO_MOOD, 5, NO_MOOD, NO_MOOD, 2]

    def test_records_outside_window_are_ignored(self):
        series = build_weekly_series([rec(7, 1), rec(-1, 1)], TODAY)
        assert series.values == [NO_MOOD] * 7

    def test_duplicate_day_last_write_wins(self):
        series = build_weekly_series([rec(0, 2), rec(0, 4)], TODAY)
        assert series.values[-1] == 4

    def test_window_end_accepts_strings(self):
        series = build_weekly_series([rec(0, 3)], "2024-03-15")
        assert series.values[-1] == 3

    @pytest.mark.parametrize("score", [0, 6, -1, 2.5])
    def test_invalid_scores_raise(self, score):
        with pytest.raises(ValueError):
            build_weekly_series([MoodRecord(day=TODAY, score=score)], TODAY)


class TestAverageMood:
    def test_all_sentinel_has_no_average(self):
        """No entries must read as "no data", not as zero."""
        series = build_weekly_series([], TODAY)
        assert series.average is None
        assert average_mood([NO_MOOD] * 7) is None

    def test_average_ignores_sentinel(self):
        series = build_weekly_series([rec(0, 2), rec(1, 4)], TODAY)
        assert series.average == pytest.approx(3.0)

    def test_worst_score_is_not_confused_with_missing(self):
        series = build_weekly_series([rec(0, 5)], TODAY)
        assert series.average == 5.0


class TestTimelineSeries:
    def test_thirty_day_window_with_two_entries(self):
        start = TODAY - timedelta(days=29)
        timeline = build_timeline_series([rec(0, 1), rec(10, 5)], start, TODAY)

        assert len(timeline) == 30
        assert [p.day for p in timeline] == sorted(p.day for p in timeline)
        assert sum(1 for p in timeline if p.value is None) == 28
        assert timeline[-1].value == 1
        assert timeline[-11].value == 5

    def test_absent_marker_differs_from_worst_score(self):
        timeline = build_timeline_series([rec(0, 5)], TODAY - timedelta(days=1), TODAY)
        assert [p.value for p in timeline] == [None, 5]

    def test_single_day_window(self):
        timeline = build_timeline_series([], TODAY, TODAY)
        assert len(timeline) == 1
        assert timeline[0].value is None

    def test_reversed_window_raises(self):
        with pytest.raises(ValueError):
            build_timeline_series([], TODAY, TODAY - timedelta(days=3))

    def test_malformed_window_raises(self):
        with pytest.raises(ValueError):
            build_timeline_series([], "03/01/2024", TODAY)


class TestHistoryAggregate:
    def test_aggregate_combines_both_windows(self):
        fetched_at = datetime(2024, 3, 15, 9, 0)
        weekly = [rec(0, 2), rec(2, 4)]
        timeline = weekly + [rec(20, 1)]

        aggregate = build_history_aggregate(weekly, timeline, today=TODAY, fetched_at=fetched_at)

        assert len(aggregate.chart_series) == 7
        assert aggregate.average_mood == pytest.approx(3.0)
        assert len(aggregate.timeline_series) == 30
        assert aggregate.timeline_series[0].day == TODAY - timedelta(days=29)
        assert aggregate.fetched_at == fetched_at
        assert aggregate.is_stale is False
        assert aggregate.chart_values[-1] == 2

    def test_mood_record_from_raw_validates(self):
        assert MoodRecord.from_raw("2024-03-15", 3) == MoodRecord(day=TODAY, score=3)
        with pytest.raises(ValueError):
            MoodRecord.from_raw("2024-03-15", 0)
