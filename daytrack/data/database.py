"""Database entry point bundling the record stores over one key-value store."""

from pathlib import Path
from typing import Optional

from daytrack.data.records import ExerciseStore, ExpenseStore, HabitStore, JournalStore
from daytrack.data.storage import KeyValueStore
from daytrack.utils.config import config


class Database:
    """All record collections backed by a single SQLite file."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or config.db_path
        self.kv = KeyValueStore(self.db_path)
        self.journal = JournalStore(self.kv)
        self.exercises = ExerciseStore(self.kv)
        self.habits = HabitStore(self.kv)
        self.expenses = ExpenseStore(self.kv)

    def clear_all(self) -> None:
        """Remove every stored record (for resets and tests)."""
        self.journal.clear()
        self.exercises.clear()
        self.habits.clear()
        self.expenses.clear()


# Global database instance
db = Database()
