"""AI journaling flow: extract, preview, then commit as ordinary records.

``ExtractionSession`` drives the states a caller can observe::

    idle -> extracting -> extracted_preview | failed
    extracted_preview -> committing -> committed | failed

Commit fans each surviving extracted item out to the matching record
store and creates one journal entry for the text itself.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

from daytrack.core.entries import (
    ExerciseEntry,
    ExerciseEntryCreate,
    ExpenseEntry,
    ExpenseEntryCreate,
    HabitEntry,
    HabitEntryCreate,
    HabitFrequency,
    JournalEntry,
    JournalEntryCreate,
    MoodType,
)
from daytrack.core.extraction import ExtractionResult
from daytrack.utils.exceptions import DayTrackError, ExtractionFailure, InvalidTransition
from daytrack.utils.logger import get_logger

if TYPE_CHECKING:
    from daytrack.data.database import Database
    from daytrack.data.llm import LLMClient

logger = get_logger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    PREVIEW = "extracted_preview"
    COMMITTING = "committing"
    COMMITTED = "committed"
    FAILED = "failed"


class CommitResult(BaseModel):
    """Records created from one confirmed extraction."""

    journal_entry: JournalEntry
    exercises: list[ExerciseEntry] = Field(default_factory=list)
    habits: list[HabitEntry] = Field(default_factory=list)
    expenses: list[ExpenseEntry] = Field(default_factory=list)


class CommitProgress(BaseModel):
    """Records created so far by a commit that may not have finished."""

    journal_entry: Optional[JournalEntry] = None
    exercises: list[ExerciseEntry] = Field(default_factory=list)
    habits: list[HabitEntry] = Field(default_factory=list)
    expenses: list[ExpenseEntry] = Field(default_factory=list)


def resolve_mood(extraction: ExtractionResult, mood: MoodType | str | None = None) -> MoodType:
    """Mood for the committed journal entry.

    An explicitly chosen mood wins, then the first extracted activity's
    mood, then neutral.
    """
    if mood:
        return MoodType(mood)
    if extraction.activities and extraction.activities[0].mood:
        return MoodType(extraction.activities[0].mood)
    return MoodType.NEUTRAL


def commit_extraction(
    db: Database,
    extraction: ExtractionResult,
    date: str,
    mood: MoodType | str | None = None,
    title: Optional[str] = None,
    progress: Optional[CommitProgress] = None,
) -> CommitResult:
    """Create the journal entry and one record per extracted item.

    Records are created one at a time and appended to ``progress`` as they
    are written. A storage failure part-way propagates and leaves the
    created records in ``progress``; passing the same ``progress`` again
    resumes after the last record written, so nothing is created twice.
    Once the journal entry exists, ``mood`` and ``title`` are not reapplied.
    """
    if progress is None:
        progress = CommitProgress()

    if progress.journal_entry is None:
        progress.journal_entry = db.journal.create(
            JournalEntryCreate(
                date=date,
                mood=resolve_mood(extraction, mood),
                title=title,
                content=extraction.raw_text,
            )
        )

    for exercise in extraction.exercises[len(progress.exercises):]:
        progress.exercises.append(
            db.exercises.create(
                ExerciseEntryCreate(
                    date=date,
                    type=exercise.type,
                    duration=exercise.duration,
                    distance=exercise.distance,
                    notes=exercise.notes,
                )
            )
        )

    for habit in extraction.habits[len(progress.habits):]:
        progress.habits.append(
            db.habits.create(
                HabitEntryCreate(
                    name=habit.name,
                    frequency=habit.frequency or HabitFrequency.DAILY,
                    description=habit.notes,
                )
            )
        )

    for expense in extraction.expenses[len(progress.expenses):]:
        progress.expenses.append(
            db.expenses.create(
                ExpenseEntryCreate(
                    date=date,
                    category=expense.category,
                    amount=expense.amount,
                    description=expense.description,
                )
            )
        )

    result = CommitResult(
        journal_entry=progress.journal_entry,
        exercises=progress.exercises,
        habits=progress.habits,
        expenses=progress.expenses,
    )
    logger.info(
        "extraction_committed",
        journal_entry_id=result.journal_entry.id,
        exercises=len(result.exercises),
        habits=len(result.habits),
        expenses=len(result.expenses),
    )
    return result


class ExtractionSession:
    """One pass through the AI journaling flow for a single entry."""

    def __init__(self, client: LLMClient, db: Database):
        self.client = client
        self.db = db
        self.state = SessionState.IDLE
        self.date: Optional[str] = None
        self.extraction: Optional[ExtractionResult] = None
        self.committed: Optional[CommitResult] = None
        self.progress: Optional[CommitProgress] = None
        self.error: Optional[str] = None

    def _require(self, action: str, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise InvalidTransition(action, self.state.value)

    async def extract(
        self, journal_text: str, date: str, mood: Optional[str] = None
    ) -> ExtractionResult:
        """Run the extraction and move to the preview state.

        Raises:
            ExtractionFailure: The call failed; the session is ``failed``.
        """
        self._require("extract", SessionState.IDLE, SessionState.PREVIEW, SessionState.FAILED)
        self.state = SessionState.EXTRACTING
        self.error = None
        try:
            self.extraction = await self.client.extract(journal_text, date, mood)
        except ExtractionFailure as e:
            self.extraction = None
            self._fail(e)
            raise
        self.date = date
        self.progress = None
        self.state = SessionState.PREVIEW
        return self.extraction

    def confirm(self, mood: MoodType | str | None = None, title: Optional[str] = None) -> CommitResult:
        """Commit the previewed extraction.

        A failed commit may be retried with another ``confirm``; the retry
        picks up after the records the failed attempt already created.
        """
        if self.state == SessionState.FAILED and self.extraction is not None:
            self.state = SessionState.PREVIEW
        self._require("confirm", SessionState.PREVIEW)

        self.state = SessionState.COMMITTING
        if self.progress is None:
            self.progress = CommitProgress()
        try:
            self.committed = commit_extraction(
                self.db, self.extraction, self.date, mood, title, progress=self.progress
            )
        except DayTrackError as e:
            self._fail(e)
            raise
        self.state = SessionState.COMMITTED
        return self.committed

    def reset(self) -> None:
        """Return to idle, discarding any preview."""
        self.state = SessionState.IDLE
        self.date = None
        self.extraction = None
        self.committed = None
        self.progress = None
        self.error = None

    def _fail(self, error: DayTrackError) -> None:
        self.state = SessionState.FAILED
        self.error = error.message
        logger.warning("extraction_session_failed", error=error.message)
