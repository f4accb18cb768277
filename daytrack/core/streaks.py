"""Streak calculation over sparse sets of calendar dates."""

from collections.abc import Iterable
from datetime import date, timedelta

from daytrack.core.entries import HabitCompletion, HabitEntry
from daytrack.utils.helpers import get_today, parse_date


def _to_date_set(dates: Iterable[str | date]) -> set[date]:
    result = set()
    for value in dates:
        try:
            result.add(parse_date(value))
        except (TypeError, ValueError):
            continue
    return result


def compute_streak(dates: Iterable[str | date], today: date | None = None) -> int:
    """Count consecutive days, ending today, that appear in ``dates``.

    The count starts at today and walks backwards one day at a time; the
    first missing day ends it. A set without today's date always yields 0,
    however long the run of earlier days. Duplicate dates count once and
    unparseable values are ignored.

    Args:
        dates: ISO ``YYYY-MM-DD`` strings or ``date`` objects.
        today: Reference day, defaults to the local calendar date.
    """
    day_set = _to_date_set(dates)
    if not day_set:
        return 0

    today = today or get_today()
    streak = 0
    while today - timedelta(days=streak) in day_set:
        streak += 1
    return streak


def compute_habit_streaks(
    habits: Iterable[HabitEntry],
    completions: Iterable[HabitCompletion],
    today: date | None = None,
) -> dict[str, int]:
    """Current streak per habit id, counting only completed days."""
    completed_dates: dict[str, list[str]] = {}
    for completion in completions:
        if completion.completed:
            completed_dates.setdefault(completion.habit_id, []).append(completion.date)

    return {
        habit.id: compute_streak(completed_dates.get(habit.id, []), today=today)
        for habit in habits
    }
