"""Tests for streak calculation."""

from datetime import date

from daytrack.core.streaks import compute_habit_streaks, compute_streak
from tests.conftest import TODAY, make_completion, make_habit


class TestComputeStreak:
    """Tests for compute_streak."""

    def test_empty(self):
        assert compute_streak([], today=TODAY) == 0

    def test_today_only(self):
        assert compute_streak(["2024-01-15"], today=TODAY) == 1

    def test_consecutive_days(self):
        dates = ["2024-01-15", "2024-01-14", "2024-01-13"]
        assert compute_streak(dates, today=TODAY) == 3

    def test_gap_ends_streak(self):
        """2024-01-13 is missing, so the older day does not count."""
        dates = ["2024-01-15", "2024-01-14", "2024-01-12"]
        assert compute_streak(dates, today=TODAY) == 2

    def test_missing_today_is_zero(self):
        """A long run that ended yesterday is not a current streak."""
        dates = ["2024-01-14", "2024-01-13", "2024-01-12", "2024-01-11"]
        assert compute_streak(dates, today=TODAY) == 0

    def test_duplicates_count_once(self):
        dates = ["2024-01-15", "2024-01-15", "2024-01-14"]
        assert compute_streak(dates, today=TODAY) == 2

    def test_order_does_not_matter(self):
        dates = ["2024-01-13", "2024-01-15", "2024-01-14"]
        assert compute_streak(dates, today=TODAY) == 3

    def test_crosses_month_boundary(self):
        dates = ["2024-03-01", "2024-02-29", "2024-02-28"]
        assert compute_streak(dates, today=date(2024, 3, 1)) == 3

    def test_accepts_date_objects(self):
        assert compute_streak([date(2024, 1, 15), date(2024, 1, 14)], today=TODAY) == 2

    def test_ignores_unparseable(self):
        assert compute_streak(["2024-01-15", "not-a-date", None], today=TODAY) == 1

    def test_future_dates_ignored(self):
        assert compute_streak(["2024-01-16", "2024-01-15"], today=TODAY) == 1


class TestHabitStreaks:
    """Tests for per-habit streaks."""

    def test_every_habit_has_a_streak(self):
        habits = [make_habit("habit_1"), make_habit("habit_2", "Read")]
        completions = [
            make_completion("habit_1", "2024-01-15"),
            make_completion("habit_1", "2024-01-14"),
        ]
        assert compute_habit_streaks(habits, completions, today=TODAY) == {
            "habit_1": 2,
            "habit_2": 0,
        }

    def test_uncompleted_days_break_streak(self):
        habits = [make_habit("habit_1")]
        completions = [
            make_completion("habit_1", "2024-01-15"),
            make_completion("habit_1", "2024-01-14", completed=False),
            make_completion("habit_1", "2024-01-13"),
        ]
        assert compute_habit_streaks(habits, completions, today=TODAY) == {"habit_1": 1}

    def test_other_habits_completions_ignored(self):
        habits = [make_habit("habit_1")]
        completions = [make_completion("habit_2", "2024-01-15")]
        assert compute_habit_streaks(habits, completions, today=TODAY) == {"habit_1": 0}
