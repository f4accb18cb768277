"""Record stores for each collection kept in the key-value store.

Each collection is one JSON array under its own key. Every mutation is a
read-modify-write of the whole array, serialized by a per-collection lock
and guarded by a version check on write, so a concurrent writer causes a
``StaleWriteError`` instead of a silently lost update.

Read paths never raise storage errors: an unreadable or corrupt
collection is logged and reads as empty.
"""

import json
import threading
from contextlib import contextmanager
from typing import Generic, Iterator, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from daytrack.core.entries import (
    ExerciseEntry,
    ExerciseEntryCreate,
    ExerciseEntryUpdate,
    ExerciseType,
    ExpenseCategory,
    ExpenseEntry,
    ExpenseEntryCreate,
    ExpenseEntryUpdate,
    HabitCompletion,
    HabitEntry,
    HabitEntryCreate,
    HabitEntryUpdate,
    JournalEntry,
    JournalEntryCreate,
    JournalEntryUpdate,
    StoredRecord,
)
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
from daytrack.data.storage import KeyValueStore
from daytrack.utils.config import config
from daytrack.utils.exceptions import StorageReadError, StorageWriteError
from daytrack.utils.helpers import generate_id, now_ms
from daytrack.utils.logger import get_logger

logger = get_logger(__name__)

ENTRIES_KEY = "day_tracker_entries"
EXERCISES_KEY = "day_tracker_exercises"
HABITS_KEY = "day_tracker_habits"
COMPLETIONS_KEY = "day_tracker_habit_completions"
EXPENSES_KEY = "day_tracker_expenses"

R = TypeVar("R", bound=StoredRecord)

_locks: dict[tuple[str, str], threading.RLock] = {}
_locks_guard = threading.Lock()


def _collection_lock(store: KeyValueStore, key: str) -> threading.RLock:
    with _locks_guard:
        return _locks.setdefault((str(store.db_path), key), threading.RLock())


class Collection:
    """Raw JSON array under one key, with decode and versioned write."""

    def __init__(self, store: KeyValueStore, key: str):
        self.store = store
        self.key = key
        self.lock = _collection_lock(store, key)

    def _decode(self, value: Optional[str]) -> list[dict]:
        if value is None:
            return []
        try:
            data = json.loads(value)
        except json.JSONDecodeError as e:
            raise StorageReadError(self.key, f"invalid JSON: {e.msg}") from e
        if not isinstance(data, list):
            raise StorageReadError(self.key, "expected a JSON array")
        return [item for item in data if isinstance(item, dict)]

    def load(self) -> list[dict]:
        """Read the array, degrading to an empty list on any read failure."""
        try:
            value, _ = self.store.read(self.key)
            return self._decode(value)
        except StorageReadError as e:
            logger.warning("collection_read_failed", key=self.key, error=e.message)
            return []

    @contextmanager
    def mutate(self) -> Iterator[list[dict]]:
        """Yield the array for in-place changes and write it back afterwards.

        Exiting via an exception skips the write. Raising ``Unchanged``
        inside the block also skips it, without propagating.
        """
        with self.lock:
            try:
                value, version = self.store.read(self.key)
            except StorageReadError as e:
                raise StorageWriteError(self.key, e.message) from e
            try:
                items = self._decode(value)
            except StorageReadError as e:
                # A corrupt array is replaced, as a reader would have seen it empty
                logger.warning("collection_reset", key=self.key, error=e.message)
                items = []

            try:
                yield items
            except Unchanged:
                return

            try:
                self.store.set_item(self.key, json.dumps(items), expected_version=version)
            except StorageWriteError as e:
                logger.error("collection_write_failed", key=self.key, error=e.message)
                raise

    def clear(self) -> None:
        with self.lock:
            self.store.remove_item(self.key)


class Unchanged(Exception):
    """Raised inside ``Collection.mutate`` to leave the collection untouched."""


def _find_index(items: list[dict], record_id: str) -> int:
    for index, item in enumerate(items):
        if item.get("id") == record_id:
            return index
    return -1


class RecordStore(Generic[R]):
    """CRUD over one collection of records.

    New records go to the head of the stored array (most recent first);
    callers that need an order sort explicitly.
    """

    key: str
    id_prefix: str
    model: type[R]
    create_model: type[BaseModel]
    update_model: type[BaseModel]

    def __init__(self, store: KeyValueStore):
        self.collection = Collection(store, self.key)

    def _validate(self, items: list[dict]) -> list[R]:
        records = []
        for item in items:
            try:
                records.append(self.model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "invalid_record_skipped", key=self.key, id=item.get("id"), errors=e.error_count()
                )
        return records

    def get_all(self) -> list[R]:
        """Get all records in stored order."""
        return self._validate(self.collection.load())

    def get_by_id(self, record_id: str) -> Optional[R]:
        """Get a record by id, or None."""
        for record in self.get_all():
            if record.id == record_id:
                return record
        return None

    def get_by_date(self, date: str) -> list[R]:
        """Get records dated on a calendar day."""
        return [r for r in self.get_all() if getattr(r, "date", None) == date]

    def create(self, data: BaseModel | dict) -> R:
        """Create a record, assigning its id and timestamps."""
        if isinstance(data, dict):
            data = self.create_model.model_validate(data)
        now = now_ms()
        record = self.model(
            id=generate_id(self.id_prefix),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        with self.collection.mutate() as items:
            items.insert(0, record.to_storage())
        return record

    def update(self, record_id: str, updates: BaseModel | dict) -> Optional[R]:
        """Apply changes to a record; returns None if the id is unknown.

        The id and creation time are preserved and ``updated_at`` is
        refreshed. Fields left unset keep their current value; an explicit
        None clears a field whose default is None and is ignored otherwise.
        """
        if isinstance(updates, dict):
            updates = self.update_model.model_validate(updates)
        changes = {
            name: value
            for name, value in updates.model_dump(exclude_unset=True).items()
            if value is not None or self.model.model_fields[name].default is None
        }

        updated: Optional[R] = None
        with self.collection.mutate() as items:
            index = _find_index(items, record_id)
            if index == -1:
                raise Unchanged
            current = self.model.model_validate(items[index])
            updated = current.model_copy(update={**changes, "updated_at": now_ms()})
            items[index] = updated.to_storage()
        return updated

    def delete(self, record_id: str) -> bool:
        """Hard-delete a record; returns False if the id is unknown."""
        with self.collection.mutate() as items:
            index = _find_index(items, record_id)
            if index == -1:
                raise Unchanged
            del items[index]
            return True
        return False

    def clear(self) -> None:
        """Remove every record in the collection."""
        self.collection.clear()


class JournalStore(RecordStore[JournalEntry]):
    key = ENTRIES_KEY
    id_prefix = "entry"
    model = JournalEntry
    create_model = JournalEntryCreate
    update_model = JournalEntryUpdate

    def calculate_stats(self) -> JournalStats:
        return calculate_journal_stats(self.get_all())


class ExerciseStore(RecordStore[ExerciseEntry]):
    key = EXERCISES_KEY
    id_prefix = "exercise"
    model = ExerciseEntry
    create_model = ExerciseEntryCreate
    update_model = ExerciseEntryUpdate

    def get_by_type(self, exercise_type: ExerciseType | str) -> list[ExerciseEntry]:
        exercise_type = ExerciseType(exercise_type)
        return [e for e in self.get_all() if e.type == exercise_type]

    def calculate_stats(self) -> ExerciseStats:
        return calculate_exercise_stats(self.get_all())


class ExpenseStore(RecordStore[ExpenseEntry]):
    key = EXPENSES_KEY
    id_prefix = "expense"
    model = ExpenseEntry
    create_model = ExpenseEntryCreate
    update_model = ExpenseEntryUpdate

    def get_by_category(self, category: ExpenseCategory | str) -> list[ExpenseEntry]:
        category = ExpenseCategory(category)
        return [e for e in self.get_all() if e.category == category]

    def calculate_stats(self) -> ExpenseStats:
        return calculate_expense_stats(self.get_all())


class HabitStore(RecordStore[HabitEntry]):
    """Habits plus their per-day completions, kept under a second key."""

    key = HABITS_KEY
    id_prefix = "habit"
    model = HabitEntry
    create_model = HabitEntryCreate
    update_model = HabitEntryUpdate

    def __init__(self, store: KeyValueStore):
        super().__init__(store)
        self.completions = Collection(store, COMPLETIONS_KEY)

    def get_by_date(self, date: str) -> list[HabitEntry]:
        """Habits with a completed completion on a calendar day."""
        done = {c.habit_id for c in self.get_all_completions() if c.date == date and c.completed}
        return [h for h in self.get_all() if h.id in done]

    def delete(self, record_id: str) -> bool:
        """Delete a habit together with all of its completions."""
        with self.collection.lock, self.completions.lock:
            if self.get_by_id(record_id) is None:
                return False
            with self.completions.mutate() as items:
                remaining = [c for c in items if c.get("habitId") != record_id]
                if len(remaining) == len(items):
                    raise Unchanged
                items[:] = remaining
            return super().delete(record_id)

    def clear(self) -> None:
        """Remove all habits and completions."""
        super().clear()
        self.completions.clear()

    def get_all_completions(self) -> list[HabitCompletion]:
        completions = []
        for item in self.completions.load():
            try:
                completions.append(HabitCompletion.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "invalid_record_skipped", key=COMPLETIONS_KEY, id=item.get("id"), errors=e.error_count()
                )
        return completions

    def get_completions_by_habit(self, habit_id: str) -> list[HabitCompletion]:
        return [c for c in self.get_all_completions() if c.habit_id == habit_id]

    def get_completion_by_date(self, habit_id: str, date: str) -> Optional[HabitCompletion]:
        for completion in self.get_all_completions():
            if completion.habit_id == habit_id and completion.date == date:
                return completion
        return None

    def toggle_completion(self, habit_id: str, date: str, notes: Optional[str] = None) -> HabitCompletion:
        """Flip the completion for a habit on a day, creating it as completed.

        At most one completion exists per ``(habit_id, date)``.
        """
        now = now_ms()
        with self.completions.mutate() as items:
            for index, item in enumerate(items):
                if item.get("habitId") == habit_id and item.get("date") == date:
                    current = HabitCompletion.model_validate(item)
                    changes = {"completed": not current.completed, "updated_at": now}
                    if notes:
                        changes["notes"] = notes
                    completion = current.model_copy(update=changes)
                    items[index] = completion.to_storage()
                    break
            else:
                completion = HabitCompletion(
                    id=generate_id("completion"),
                    habit_id=habit_id,
                    date=date,
                    completed=True,
                    notes=notes,
                    created_at=now,
                )
                items.append(completion.to_storage())
        return completion

    def calculate_stats(self) -> HabitStats:
        return calculate_habit_stats(
            self.get_all(),
            self.get_all_completions(),
            window_days=config.habit_rate_window_days,
        )
