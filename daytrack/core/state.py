"""Application state held by the UI layer.

The record stores and calculators stay stateless. A front end keeps one
``AppState``, applies the result of each store operation to it and
recomputes statistics from the in-memory collections afterwards.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from daytrack.core.entries import (
    ExerciseEntry,
    ExpenseEntry,
    HabitCompletion,
    HabitEntry,
    JournalEntry,
    StoredRecord,
)
from daytrack.core.session import CommitResult
from daytrack.core.stats import (
    ExerciseStats,
    ExpenseStats,
    HabitStats,
    JournalStats,
    calculate_exercise_stats,
    calculate_expense_stats,
    calculate_habit_stats,
    calculate_journal_stats,
)
from daytrack.utils.config import config

if TYPE_CHECKING:
    from daytrack.data.database import Database

_COLLECTIONS: dict[type, str] = {
    JournalEntry: "entries",
    ExerciseEntry: "exercises",
    HabitEntry: "habits",
    ExpenseEntry: "expenses",
}


class AppState(BaseModel):
    """Current collections and their statistics."""

    entries: list[JournalEntry] = Field(default_factory=list)
    exercises: list[ExerciseEntry] = Field(default_factory=list)
    habits: list[HabitEntry] = Field(default_factory=list)
    completions: list[HabitCompletion] = Field(default_factory=list)
    expenses: list[ExpenseEntry] = Field(default_factory=list)

    journal_stats: JournalStats = Field(default_factory=JournalStats)
    exercise_stats: ExerciseStats = Field(default_factory=ExerciseStats)
    habit_stats: HabitStats = Field(default_factory=HabitStats)
    expense_stats: ExpenseStats = Field(default_factory=ExpenseStats)

    error: Optional[str] = None

    @classmethod
    def load(cls, db: Database, today: date | None = None) -> AppState:
        """Read every collection from the database and compute stats."""
        state = cls(
            entries=db.journal.get_all(),
            exercises=db.exercises.get_all(),
            habits=db.habits.get_all(),
            completions=db.habits.get_all_completions(),
            expenses=db.expenses.get_all(),
        )
        state.refresh_stats(today)
        return state

    def refresh_stats(self, today: date | None = None) -> None:
        self.journal_stats = calculate_journal_stats(self.entries, today=today)
        self.exercise_stats = calculate_exercise_stats(self.exercises)
        self.habit_stats = calculate_habit_stats(
            self.habits,
            self.completions,
            today=today,
            window_days=config.habit_rate_window_days,
        )
        self.expense_stats = calculate_expense_stats(self.expenses)

    def _collection(self, record: StoredRecord) -> list:
        for record_type, name in _COLLECTIONS.items():
            if isinstance(record, record_type):
                return getattr(self, name)
        raise TypeError(f"Unsupported record type: {type(record).__name__}")

    def apply_created(self, record: StoredRecord) -> None:
        """Add a newly created record at the head of its collection."""
        self._collection(record).insert(0, record)
        self.refresh_stats()

    def apply_updated(self, record: Optional[StoredRecord]) -> None:
        """Replace a record by id; a None result (unknown id) is ignored."""
        if record is None:
            return
        items = self._collection(record)
        for index, existing in enumerate(items):
            if existing.id == record.id:
                items[index] = record
                self.refresh_stats()
                return

    def apply_deleted(self, record_type: type[StoredRecord], record_id: str, deleted: bool = True) -> None:
        """Drop a deleted record; habit deletion also drops its completions."""
        if not deleted:
            return
        name = _COLLECTIONS[record_type]
        setattr(self, name, [r for r in getattr(self, name) if r.id != record_id])
        if record_type is HabitEntry:
            self.completions = [c for c in self.completions if c.habit_id != record_id]
        self.refresh_stats()

    def apply_toggled(self, completion: HabitCompletion) -> None:
        """Insert or replace the completion for its habit and day."""
        for index, existing in enumerate(self.completions):
            if existing.id == completion.id:
                self.completions[index] = completion
                break
        else:
            self.completions.append(completion)
        self.refresh_stats()

    def apply_commit(self, result: CommitResult) -> None:
        """Add every record created by a confirmed extraction."""
        self.entries.insert(0, result.journal_entry)
        for exercise in result.exercises:
            self.exercises.insert(0, exercise)
        for habit in result.habits:
            self.habits.insert(0, habit)
        for expense in result.expenses:
            self.expenses.insert(0, expense)
        self.refresh_stats()

    def set_error(self, error: Optional[str]) -> None:
        self.error = error
