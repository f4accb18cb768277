"""Tests for the extract-preview-commit flow."""

import httpx
import pytest

from daytrack.core.entries import ExerciseType, HabitFrequency, MoodType
from daytrack.core.extraction import filter_extraction
from daytrack.core.session import (
    ExtractionSession,
    SessionState,
    CommitProgress,
    commit_extraction,
    resolve_mood,
)
from daytrack.utils.exceptions import ExtractionFailure, InvalidTransition, StorageWriteError


def _extraction(content, text="Ran 5k this morning"):
    return filter_extraction(content, journal_text=text, model="test-model")


class TestResolveMood:
    """Tests for resolve_mood."""

    def test_explicit_mood_wins(self, extraction_content):
        assert resolve_mood(_extraction(extraction_content), "sad") == MoodType.SAD

    def test_first_activity_mood(self, extraction_content):
        assert resolve_mood(_extraction(extraction_content)) == MoodType.HAPPY

    def test_defaults_to_neutral(self):
        assert resolve_mood(_extraction({})) == MoodType.NEUTRAL


class TestCommitExtraction:
    """Tests for commit_extraction."""

    def test_single_exercise(self, isolated_db):
        """One extracted exercise yields one journal entry and one exercise record."""
        extraction = _extraction(
            {"exercises": [{"type": "running", "duration": 30, "distance": 5, "confidence": 0.9}]}
        )

        result = commit_extraction(isolated_db, extraction, "2024-01-15")

        entries = isolated_db.journal.get_all()
        exercises = isolated_db.exercises.get_all()
        assert len(entries) == 1
        assert len(exercises) == 1
        assert entries[0].content == "Ran 5k this morning"
        assert entries[0].date == "2024-01-15"
        assert entries[0].mood == MoodType.NEUTRAL
        assert exercises[0].type == ExerciseType.RUNNING
        assert exercises[0].duration == 30
        assert exercises[0].distance == 5
        assert result.exercises == exercises
        assert isolated_db.habits.get_all() == []
        assert isolated_db.expenses.get_all() == []

    def test_all_sections(self, isolated_db, extraction_content):
        extraction = _extraction(extraction_content)

        result = commit_extraction(isolated_db, extraction, "2024-01-15", title="Monday")

        assert result.journal_entry.title == "Monday"
        assert result.journal_entry.mood == MoodType.HAPPY
        assert len(result.exercises) == 1
        assert [h.name for h in isolated_db.habits.get_all()] == ["Meditation"]
        assert isolated_db.habits.get_all()[0].frequency == HabitFrequency.DAILY
        expense = isolated_db.expenses.get_all()[0]
        assert expense.amount == 12.5
        assert expense.description == "Lunch"
        assert expense.date == "2024-01-15"

    def test_empty_extraction_still_saves_entry(self, isolated_db):
        result = commit_extraction(isolated_db, _extraction({}), "2024-01-15", mood="grateful")
        assert result.journal_entry.mood == MoodType.GRATEFUL
        assert len(isolated_db.journal.get_all()) == 1

    def test_resumes_from_progress(self, isolated_db, extraction_content, monkeypatch):
        """Records already in progress are not written again."""
        extraction = _extraction(extraction_content)
        progress = CommitProgress()

        def broken_create(data):
            raise StorageWriteError("day_tracker_habits", "disk full")

        original_create = isolated_db.habits.create
        monkeypatch.setattr(isolated_db.habits, "create", broken_create)
        with pytest.raises(StorageWriteError):
            commit_extraction(isolated_db, extraction, "2024-01-15", progress=progress)
        assert progress.journal_entry is not None
        assert len(progress.exercises) == 1
        assert progress.habits == []

        monkeypatch.setattr(isolated_db.habits, "create", original_create)
        result = commit_extraction(isolated_db, extraction, "2024-01-15", progress=progress)

        assert result.journal_entry.id == progress.journal_entry.id
        assert len(isolated_db.journal.get_all()) == 1
        assert len(isolated_db.exercises.get_all()) == 1
        assert len(isolated_db.habits.get_all()) == 1
        assert len(isolated_db.expenses.get_all()) == 1


class TestExtractionSession:
    """Tests for ExtractionSession state transitions."""

    @pytest.mark.asyncio
    async def test_happy_path(self, isolated_db, llm_returning, extraction_content):
        session = ExtractionSession(llm_returning(extraction_content), isolated_db)
        assert session.state == SessionState.IDLE

        extraction = await session.extract("Ran 5k", "2024-01-15")
        assert session.state == SessionState.PREVIEW
        assert len(extraction.exercises) == 1
        assert isolated_db.journal.get_all() == []

        result = session.confirm()
        assert session.state == SessionState.COMMITTED
        assert result.journal_entry.content == "Ran 5k"
        assert len(isolated_db.journal.get_all()) == 1

    @pytest.mark.asyncio
    async def test_extraction_failure(self, isolated_db, make_llm):
        session = ExtractionSession(make_llm(lambda r: httpx.Response(500)), isolated_db)

        with pytest.raises(ExtractionFailure):
            await session.extract("Ran 5k", "2024-01-15")

        assert session.state == SessionState.FAILED
        assert session.error.startswith("Failed to extract from journal")
        assert session.extraction is None
        with pytest.raises(InvalidTransition):
            session.confirm()

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, isolated_db, make_llm, extraction_content):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"choices": [{"message": {"content": "{}"}}]})

        session = ExtractionSession(make_llm(handler), isolated_db)
        with pytest.raises(ExtractionFailure):
            await session.extract("text", "2024-01-15")

        await session.extract("text", "2024-01-15")
        assert session.state == SessionState.PREVIEW
        assert session.error is None

    def test_confirm_before_extract(self, isolated_db, llm_returning):
        session = ExtractionSession(llm_returning("{}"), isolated_db)
        with pytest.raises(InvalidTransition, match="Cannot confirm while session is idle"):
            session.confirm()

    @pytest.mark.asyncio
    async def test_cannot_commit_twice(self, isolated_db, llm_returning, extraction_content):
        session = ExtractionSession(llm_returning(extraction_content), isolated_db)
        await session.extract("Ran 5k", "2024-01-15")
        session.confirm()

        with pytest.raises(InvalidTransition):
            session.confirm()
        assert len(isolated_db.journal.get_all()) == 1

    @pytest.mark.asyncio
    async def test_commit_failure_can_retry(self, isolated_db, llm_returning, extraction_content, monkeypatch):
        session = ExtractionSession(llm_returning(extraction_content), isolated_db)
        await session.extract("Ran 5k", "2024-01-15")

        original_create = isolated_db.journal.create

        def broken_create(data):
            raise StorageWriteError("day_tracker_entries", "disk full")

        monkeypatch.setattr(isolated_db.journal, "create", broken_create)
        with pytest.raises(StorageWriteError):
            session.confirm()
        assert session.state == SessionState.FAILED

        monkeypatch.setattr(isolated_db.journal, "create", original_create)
        session.confirm(mood=MoodType.EXCITED)
        assert session.state == SessionState.COMMITTED
        assert isolated_db.journal.get_all()[0].mood == MoodType.EXCITED

    @pytest.mark.asyncio
    async def test_retry_after_partial_commit(self, isolated_db, llm_returning, extraction_content, monkeypatch):
        session = ExtractionSession(llm_returning(extraction_content), isolated_db)
        await session.extract("Ran 5k", "2024-01-15")

        original_create = isolated_db.expenses.create

        def broken_create(data):
            raise StorageWriteError("day_tracker_expenses", "disk full")

        monkeypatch.setattr(isolated_db.expenses, "create", broken_create)
        with pytest.raises(StorageWriteError):
            session.confirm()
        assert session.state == SessionState.FAILED
        assert len(isolated_db.journal.get_all()) == 1
        assert isolated_db.expenses.get_all() == []

        monkeypatch.setattr(isolated_db.expenses, "create", original_create)
        result = session.confirm()

        assert session.state == SessionState.COMMITTED
        assert len(isolated_db.journal.get_all()) == 1
        assert len(isolated_db.exercises.get_all()) == 1
        assert len(isolated_db.habits.get_all()) == 1
        assert len(isolated_db.expenses.get_all()) == 1
        assert result.expenses[0].description == "Lunch"

    @pytest.mark.asyncio
    async def test_reset(self, isolated_db, llm_returning, extraction_content):
        session = ExtractionSession(llm_returning(extraction_content), isolated_db)
        await session.extract("Ran 5k", "2024-01-15")

        session.reset()

        assert session.state == SessionState.IDLE
        assert session.extraction is None
        assert isolated_db.journal.get_all() == []
