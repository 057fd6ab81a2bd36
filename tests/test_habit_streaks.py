"""Tests for habit streak calculations.

These tests verify the logic for calculating current and best streaks,
including edge cases like:
- Empty completion history
- Streaks ending today vs yesterday vs further back
- Gaps in habit completion
- Duplicate days (double taps)
- Malformed day strings
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from habitlens.infra.repositories.habit import SQLModelHabitRepository
from habitlens.services.habits import HabitService
from habitlens.services.streaks import StreakResult, calculate_streaks

TODAY = date(2024, 3, 15)


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


class TestCurrentStreak:
    """Tests for the current (live) streak."""

    def test_no_dates_returns_zero(self):
        """Empty input yields zero for both streaks."""
        result = calculate_streaks([], today=TODAY)
        assert (result.current_streak, result.best_streak) == (0, 0)
        assert result == StreakResult()

    def test_single_entry_today_returns_one(self):
        result = calculate_streaks([TODAY], today=TODAY)
        assert (result.current_streak, result.best_streak) == (1, 1)

    def test_single_entry_yesterday_keeps_streak_alive(self):
        result = calculate_streaks([days_ago(1)], today=TODAY)
        assert (result.current_streak, result.best_streak) == (1, 1)

    def test_three_days_ending_yesterday(self):
        """A run ending yesterday is still live."""
        result = calculate_streaks([days_ago(1), days_ago(2), days_ago(3)], today=TODAY)
        assert (result.current_streak, result.best_streak) == (3, 3)

    def test_old_single_entry_lapses(self):
        """A lone completion from five days ago counts as best but not current."""
        result = calculate_streaks([days_ago(5)], today=TODAY)
        assert (result.current_streak, result.best_streak) == (0, 1)

    def test_gap_resets_running_streak(self):
        result = calculate_streaks(
            [days_ago(10), days_ago(9), days_ago(1), TODAY], today=TODAY
        )
        assert (result.current_streak, result.best_streak) == (2, 2)

    def test_lapsed_run_keeps_best(self):
        """A long run that ended two days ago leaves current at zero."""
        days = [days_ago(n) for n in range(2, 9)]
        result = calculate_streaks(days, today=TODAY)
        assert result.current_streak == 0
        assert result.best_streak == 7

    def test_future_completion_does_not_count_as_live(self):
        result = calculate_streaks([TODAY + timedelta(days=1)], today=TODAY)
        assert (result.current_streak, result.best_streak) == (0, 1)

    def test_defaults_to_real_today(self):
        result = calculate_streaks([date.today()])
        assert result.current_streak == 1


class TestBestStreak:
    """Tests for the best historical streak."""

    def test_multiple_runs_returns_longest(self):
        days = (
            [date(2024, 1, 1) + timedelta(days=i) for i in range(3)]
            + [date(2024, 1, 10) + timedelta(days=i) for i in range(7)]
            + [date(2024, 1, 20) + timedelta(days=i) for i in range(4)]
        )
        result = calculate_streaks(days, today=TODAY)
        assert result.best_streak == 7
        assert result.current_streak == 0

    def test_current_run_can_be_best(self):
        days = [date(2024, 1, 1), date(2024, 1, 2)] + [days_ago(n) for n in range(14)]
        result = calculate_streaks(days, today=TODAY)
        assert result.best_streak == 14
        assert result.current_streak == 14

    def test_unordered_input_is_sorted(self):
        days = [days_ago(0), days_ago(2), days_ago(1), days_ago(3)]
        result = calculate_streaks(days, today=TODAY)
        assert (result.current_streak, result.best_streak) == (4, 4)

    def test_best_never_below_current(self):
        for n in range(1, 10):
            result = calculate_streaks([days_ago(i) for i in range(n)], today=TODAY)
            assert result.best_streak >= result.current_streak


class TestInputHandling:
    """Tests for duplicate and loosely typed input."""

    def test_duplicate_day_counts_once(self):
        """A double tap on the same day must not extend the streak."""
        result = calculate_streaks([TODAY, TODAY, days_ago(1)], today=TODAY)
        assert (result.current_streak, result.best_streak) == (2, 2)
        assert result.completed_days == 2

    def test_accepts_iso_strings(self):
        result = calculate_streaks(["2024-03-14", "2024-03-15"], today=TODAY)
        assert (result.current_streak, result.best_streak) == (2, 2)

    def test_accepts_zero_time_stamps_and_datetimes(self):
        result = calculate_streaks(
            ["2024-03-13T00:00:00.000Z", datetime(2024, 3, 14, 22, 30), TODAY], today=TODAY
        )
        assert (result.current_streak, result.best_streak) == (3, 3)

    @pytest.mark.parametrize("bad", ["15/03/2024", "2024-13-01", "", "yesterday", 20240315])
    def test_malformed_day_raises(self, bad):
        with pytest.raises(ValueError):
            calculate_streaks([bad], today=TODAY)


class TestHabitStatistics:
    """Streaks computed from persisted completions."""

    def test_no_completions(self, session_factory, habit_factory, user):
        habit = habit_factory(name="Exercise")
        service = HabitService(SQLModelHabitRepository(session_factory))

        result = service.statistics(habit.id, user_id=user.id, today=TODAY)
        assert result == StreakResult(0, 0, 0)

    def test_persisted_completions(self, session_factory, habit_factory, completion_factory, user):
        habit = habit_factory(name="Meditation")
        completion_factory(habit, days_ago(10), days_ago(9), days_ago(1), TODAY)
        service = HabitService(SQLModelHabitRepository(session_factory))

        result = service.statistics(habit.id, user_id=user.id, today=TODAY)
        assert result == StreakResult(current_streak=2, best_streak=2, completed_days=4)

    def test_double_completion_counts_once(self, session_factory, habit_factory, user):
        """Marking the same habit twice on one day collapses to one record."""
        habit = habit_factory(name="Reading")
        repo = SQLModelHabitRepository(session_factory)
        service = HabitService(repo)

        service.complete(habit.id, user_id=user.id, day=TODAY)
        service.complete(habit.id, user_id=user.id, day=TODAY)

        assert repo.query_completions(habit.id, user_id=user.id) == [TODAY]
        result = service.statistics(habit.id, user_id=user.id, today=TODAY)
        assert result == StreakResult(current_streak=1, best_streak=1, completed_days=1)

    def test_other_users_completions_are_ignored(
        self, session_factory, habit_factory, completion_factory, user, other_user
    ):
        habit = habit_factory(name="Walk")
        completion_factory(habit, TODAY)
        service = HabitService(SQLModelHabitRepository(session_factory))

        result = service.statistics(habit.id, user_id=other_user.id, today=TODAY)
        assert result.completed_days == 0
