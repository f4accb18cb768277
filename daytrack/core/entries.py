"""Record models for journal entries, exercises, habits and expenses."""

from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from daytrack.utils.helpers import is_valid_date


class MoodType(str, Enum):
    """Moods a journal entry can carry."""
    HAPPY = "happy"
    SAD = "sad"
    NEUTRAL = "neutral"
    ANXIOUS = "anxious"
    EXCITED = "excited"
    GRATEFUL = "grateful"


class ExerciseType(str, Enum):
    """Types of exercise."""
    RUNNING = "running"
    CYCLING = "cycling"
    GYM = "gym"
    YOGA = "yoga"
    SWIMMING = "swimming"
    SPORTS = "sports"
    WALKING = "walking"
    OTHER = "other"


class ExpenseCategory(str, Enum):
    """Spending categories."""
    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    HEALTH = "health"
    SHOPPING = "shopping"
    OTHER = "other"


class HabitFrequency(str, Enum):
    """How often a habit is meant to be done."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def _check_date(value: str) -> str:
    if not is_valid_date(value):
        raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
    return value


# Calendar day, no time component or offset
IsoDate = Annotated[str, AfterValidator(_check_date)]


class RecordModel(BaseModel):
    """Base for stored records and their inputs.

    Timestamps are epoch milliseconds and travel as ``createdAt`` /
    ``updatedAt`` in the persisted JSON; both spellings are accepted.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_storage(self) -> dict:
        """Serialize for the JSON key-value store."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StoredRecord(RecordModel):
    """Identity and audit fields shared by every stored record."""

    id: str
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")


# Journal


class JournalEntryCreate(RecordModel):
    date: IsoDate
    mood: MoodType
    title: str | None = None
    content: str
    tags: list[str] | None = None


class JournalEntryUpdate(RecordModel):
    date: IsoDate | None = None
    mood: MoodType | None = None
    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None


class JournalEntry(StoredRecord, JournalEntryCreate):
    """A journal entry for one calendar day."""


# Exercise


class ExerciseEntryCreate(RecordModel):
    date: IsoDate
    type: ExerciseType
    duration: float = Field(ge=0)  # minutes
    distance: float | None = Field(default=None, ge=0)  # km
    calories: float | None = Field(default=None, ge=0)
    notes: str | None = None


class ExerciseEntryUpdate(RecordModel):
    date: IsoDate | None = None
    type: ExerciseType | None = None
    duration: float | None = Field(default=None, ge=0)
    distance: float | None = Field(default=None, ge=0)
    calories: float | None = Field(default=None, ge=0)
    notes: str | None = None


class ExerciseEntry(StoredRecord, ExerciseEntryCreate):
    """A logged workout."""


# Habits


class HabitEntryCreate(RecordModel):
    name: str
    description: str | None = None
    frequency: HabitFrequency = HabitFrequency.DAILY


class HabitEntryUpdate(RecordModel):
    name: str | None = None
    description: str | None = None
    frequency: HabitFrequency | None = None


class HabitEntry(StoredRecord, HabitEntryCreate):
    """A habit definition. Completions are tracked separately per day."""


class HabitCompletion(RecordModel):
    """Completion state of one habit on one day.

    There is at most one completion per ``(habit_id, date)``; toggling
    flips ``completed`` on the existing record.
    """

    id: str
    habit_id: str = Field(alias="habitId")
    date: IsoDate
    completed: bool = True
    notes: str | None = None
    created_at: int = Field(alias="createdAt")
    updated_at: int | None = Field(default=None, alias="updatedAt")


# Expenses


class ExpenseEntryCreate(RecordModel):
    date: IsoDate
    category: ExpenseCategory
    amount: float = Field(ge=0)
    description: str | None = None


class ExpenseEntryUpdate(RecordModel):
    date: IsoDate | None = None
    category: ExpenseCategory | None = None
    amount: float | None = Field(default=None, ge=0)
    description: str | None = None


class ExpenseEntry(StoredRecord, ExpenseEntryCreate):
    """A single purchase or payment."""
