"""Tests for the in-memory application state."""

import pytest

from daytrack.core.entries import (
    ExerciseEntryCreate,
    ExerciseType,
    ExpenseCategory,
    ExpenseEntryCreate,
    HabitEntry,
    HabitEntryCreate,
    JournalEntry,
    JournalEntryCreate,
    MoodType,
)
from daytrack.core.extraction import filter_extraction
from daytrack.core.session import commit_extraction
from daytrack.core.state import AppState
from tests.conftest import TODAY


@pytest.fixture
def state(isolated_db) -> AppState:
    return AppState.load(isolated_db, today=TODAY)


class TestAppState:
    """Tests for AppState."""

    def test_empty_load(self, state):
        assert state.entries == []
        assert state.journal_stats.total_entries == 0
        assert state.expense_stats.category_breakdown["food"] == 0
        assert state.error is None

    def test_load_existing(self, isolated_db):
        isolated_db.journal.create(JournalEntryCreate(date="2024-01-15", mood="happy", content="x"))
        habit = isolated_db.habits.create(HabitEntryCreate(name="Read"))
        isolated_db.habits.toggle_completion(habit.id, "2024-01-15")

        state = AppState.load(isolated_db, today=TODAY)

        assert state.journal_stats.total_entries == 1
        assert state.journal_stats.current_streak == 1
        assert state.habit_stats.current_streaks == {habit.id: 1}

    def test_apply_created(self, isolated_db, state):
        older = isolated_db.journal.create(JournalEntryCreate(date="2024-01-14", mood="sad", content="x"))
        state.apply_created(older)
        newer = isolated_db.exercises.create(
            ExerciseEntryCreate(date="2024-01-15", type=ExerciseType.GYM, duration=60)
        )
        state.apply_created(newer)

        assert state.entries == [older]
        assert state.exercises == [newer]
        assert state.journal_stats.mood_distribution["sad"] == 1
        assert state.exercise_stats.total_duration == 60

    def test_apply_updated(self, isolated_db, state):
        expense = isolated_db.expenses.create(
            ExpenseEntryCreate(date="2024-01-15", category=ExpenseCategory.FOOD, amount=5)
        )
        state.apply_created(expense)

        state.apply_updated(isolated_db.expenses.update(expense.id, {"amount": 8}))
        assert state.expense_stats.total_amount == 8

        state.apply_updated(isolated_db.expenses.update("expense_0_missing", {"amount": 1}))
        assert len(state.expenses) == 1

    def test_apply_deleted_habit_drops_completions(self, isolated_db, state):
        habit = isolated_db.habits.create(HabitEntryCreate(name="Read"))
        state.apply_created(habit)
        state.apply_toggled(isolated_db.habits.toggle_completion(habit.id, "2024-01-15"))
        assert len(state.completions) == 1

        state.apply_deleted(HabitEntry, habit.id, isolated_db.habits.delete(habit.id))

        assert state.habits == []
        assert state.completions == []
        assert state.habit_stats.total_habits == 0

    def test_apply_deleted_not_found(self, isolated_db, state):
        entry = isolated_db.journal.create(JournalEntryCreate(date="2024-01-15", mood="happy", content="x"))
        state.apply_created(entry)

        state.apply_deleted(JournalEntry, entry.id, deleted=False)
        assert state.entries == [entry]

    def test_apply_toggled_replaces(self, isolated_db, state):
        habit = isolated_db.habits.create(HabitEntryCreate(name="Read"))
        state.apply_created(habit)
        state.apply_toggled(isolated_db.habits.toggle_completion(habit.id, "2024-01-15"))
        state.apply_toggled(isolated_db.habits.toggle_completion(habit.id, "2024-01-15"))

        assert len(state.completions) == 1
        assert state.completions[0].completed is False

    def test_apply_commit(self, isolated_db, state, extraction_content):
        extraction = filter_extraction(extraction_content, journal_text="Ran 5k", model="m")
        state.apply_commit(commit_extraction(isolated_db, extraction, "2024-01-15"))

        assert len(state.entries) == 1
        assert state.entries[0].mood == MoodType.HAPPY
        assert len(state.exercises) == 1
        assert len(state.habits) == 1
        assert len(state.expenses) == 1
        assert state.exercise_stats.total_workouts == 1

    def test_unsupported_record(self, state):
        with pytest.raises(TypeError):
            state.apply_created(object())

    def test_set_error(self, state):
        state.set_error("Failed to extract from journal: boom")
        assert state.error == "Failed to extract from journal: boom"
        state.set_error(None)
        assert state.error is None
