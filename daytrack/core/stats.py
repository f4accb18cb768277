"""Aggregate statistics for each record kind.

Every calculator is a pure function over an in-memory collection and
returns a fully populated zero result for empty input: all numeric fields
0 and every enumerated category key present.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import date

from pydantic import BaseModel, Field

from daytrack.core.entries import (
    ExerciseEntry,
    ExpenseCategory,
    ExpenseEntry,
    HabitCompletion,
    HabitEntry,
    JournalEntry,
    MoodType,
)
from daytrack.core.streaks import compute_habit_streaks, compute_streak

HABIT_RATE_WINDOW_DAYS = 30


def _empty_moods() -> dict[str, int]:
    return {mood.value: 0 for mood in MoodType}


def _empty_categories() -> dict[str, float]:
    return {category.value: 0 for category in ExpenseCategory}


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero, unlike the banker's rounding of ``round``."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class JournalStats(BaseModel):
    """Journal totals, streak and mood distribution."""

    total_entries: int = 0
    current_streak: int = 0
    mood_distribution: dict[str, int] = Field(default_factory=_empty_moods)
    last_entry_date: str | None = None


class ExerciseStats(BaseModel):
    """Workout totals."""

    total_workouts: int = 0
    total_duration: float = 0
    total_distance: float = 0
    total_calories: float = 0
    average_per_week: float = 0


class ExpenseStats(BaseModel):
    """Spending totals.

    ``category_breakdown`` counts expenses per category while
    ``category_totals`` sums their amounts.
    """

    total_expenses: int = 0
    total_amount: float = 0
    category_breakdown: dict[str, int] = Field(default_factory=_empty_categories)
    category_totals: dict[str, float] = Field(default_factory=_empty_categories)
    average_per_day: float = 0
    last_expense_date: str | None = None


class HabitStats(BaseModel):
    """Habit completion rate and per-habit streaks."""

    total_habits: int = 0
    completion_rate: int = 0
    current_streaks: dict[str, int] = Field(default_factory=dict)


def latest_date(records: Sequence[JournalEntry | ExpenseEntry]) -> str | None:
    """Date of the most recently dated record.

    Ties on the same date go to the most recently created record.
    """
    if not records:
        return None
    newest = max(records, key=lambda r: (r.date, r.created_at))
    return newest.date


def calculate_journal_stats(
    entries: Sequence[JournalEntry], today: date | None = None
) -> JournalStats:
    """Total count, current streak and mood distribution of journal entries."""
    if not entries:
        return JournalStats()

    moods = _empty_moods()
    for entry in entries:
        moods[MoodType(entry.mood).value] += 1

    return JournalStats(
        total_entries=len(entries),
        current_streak=compute_streak((e.date for e in entries), today=today),
        mood_distribution=moods,
        last_entry_date=latest_date(entries),
    )


def calculate_exercise_stats(exercises: Sequence[ExerciseEntry]) -> ExerciseStats:
    """Workout totals and average workouts per active week.

    Weeks are approximated from the number of distinct active days
    (``ceil(days / 7)``), not from the calendar span of the records.
    """
    if not exercises:
        return ExerciseStats()

    total_duration = sum(e.duration for e in exercises)
    total_distance = sum(e.distance or 0 for e in exercises)
    total_calories = sum(e.calories or 0 for e in exercises)

    active_days = len({e.date for e in exercises})
    weeks = max(math.ceil(active_days / 7), 1)

    return ExerciseStats(
        total_workouts=len(exercises),
        total_duration=total_duration,
        total_distance=total_distance,
        total_calories=total_calories,
        average_per_week=round_half_up(len(exercises) / weeks, 1),
    )


def calculate_expense_stats(expenses: Sequence[ExpenseEntry]) -> ExpenseStats:
    """Spending totals, category breakdown and average per spending day.

    The daily average divides by the number of distinct dates that have
    at least one expense, not by the number of days in the range.
    """
    if not expenses:
        return ExpenseStats()

    breakdown = {category.value: 0 for category in ExpenseCategory}
    totals = _empty_categories()
    total_amount = 0.0
    for expense in expenses:
        key = ExpenseCategory(expense.category).value
        breakdown[key] += 1
        totals[key] += expense.amount
        total_amount += expense.amount

    spending_days = len({e.date for e in expenses})

    return ExpenseStats(
        total_expenses=len(expenses),
        total_amount=total_amount,
        category_breakdown=breakdown,
        category_totals=totals,
        average_per_day=total_amount / spending_days,
        last_expense_date=latest_date(expenses),
    )


def calculate_habit_stats(
    habits: Sequence[HabitEntry],
    completions: Iterable[HabitCompletion],
    today: date | None = None,
    window_days: int = HABIT_RATE_WINDOW_DAYS,
) -> HabitStats:
    """Completion rate over a flat window and current streak per habit.

    The rate is completed completions / (habits x ``window_days``) as a
    percentage, capped at 100. Each habit's frequency and age are ignored.
    Completions of unknown habits are not counted.
    """
    if not habits:
        return HabitStats()

    completions = list(completions)
    habit_ids = {h.id for h in habits}
    completed = sum(1 for c in completions if c.completed and c.habit_id in habit_ids)

    rate = completed / (len(habits) * window_days) * 100

    return HabitStats(
        total_habits=len(habits),
        completion_rate=int(min(100, round_half_up(rate))),
        current_streaks=compute_habit_streaks(habits, completions, today=today),
    )
