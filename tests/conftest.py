"""Shared fixtures for DayTrack tests."""

import importlib
import json
import os
import tempfile
from datetime import date

# Keep the module-level database out of the user's home directory
os.environ.setdefault("DAYTRACK_DATA_DIR", tempfile.mkdtemp(prefix="daytrack-tests-"))

import httpx
import pytest
from typer.testing import CliRunner

from daytrack.core.entries import (
    ExerciseEntry,
    ExerciseType,
    ExpenseCategory,
    ExpenseEntry,
    HabitCompletion,
    HabitEntry,
    HabitFrequency,
    JournalEntry,
    MoodType,
)
from daytrack.data.database import Database
from daytrack.data.llm import LLMClient
from daytrack.data.storage import KeyValueStore
from daytrack.utils import config as config_module

TODAY = date(2024, 1, 15)


# Record builders
def make_journal(day: str = "2024-01-15", mood=MoodType.HAPPY, created_at: int = 1, **kwargs) -> JournalEntry:
    return JournalEntry(
        id=kwargs.pop("id", f"entry_{created_at}_abc"),
        date=day,
        mood=mood,
        content=kwargs.pop("content", "Good day"),
        created_at=created_at,
        updated_at=created_at,
        **kwargs,
    )


def make_exercise(day: str = "2024-01-15", type=ExerciseType.RUNNING, duration: float = 30, **kwargs) -> ExerciseEntry:
    return ExerciseEntry(
        id=kwargs.pop("id", f"exercise_{day}_{duration}"),
        date=day,
        type=type,
        duration=duration,
        created_at=kwargs.pop("created_at", 1),
        updated_at=1,
        **kwargs,
    )


def make_expense(day: str = "2024-01-15", category=ExpenseCategory.FOOD, amount: float = 10, **kwargs) -> ExpenseEntry:
    return ExpenseEntry(
        id=kwargs.pop("id", f"expense_{day}_{amount}"),
        date=day,
        category=category,
        amount=amount,
        created_at=kwargs.pop("created_at", 1),
        updated_at=1,
        **kwargs,
    )


def make_habit(habit_id: str = "habit_1", name: str = "Meditate") -> HabitEntry:
    return HabitEntry(
        id=habit_id,
        name=name,
        frequency=HabitFrequency.DAILY,
        created_at=1,
        updated_at=1,
    )


def make_completion(habit_id: str, day: str, completed: bool = True) -> HabitCompletion:
    return HabitCompletion(
        id=f"completion_{habit_id}_{day}",
        habit_id=habit_id,
        date=day,
        completed=completed,
        created_at=1,
    )


# LLM fixtures
def chat_response(content) -> dict:
    """Body of a chat-completions response carrying ``content``."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


@pytest.fixture
def extraction_content():
    """A model answer with items on both sides of the confidence threshold."""
    return {
        "exercises": [
            {"type": "running", "duration": 30, "distance": 5, "confidence": 0.95},
            {"type": "yoga", "duration": 10, "confidence": 0.39},
        ],
        "habits": [{"name": "Meditation", "completed": True, "confidence": 0.4}],
        "expenses": [
            {"category": "food", "amount": 12.5, "description": "Lunch", "confidence": 0.41},
        ],
        "activities": [
            {"type": "event", "title": "Met an old friend", "mood": "happy", "confidence": 0.8},
        ],
    }


@pytest.fixture
def make_llm():
    """Build an LLM client whose HTTP calls are answered by ``handler``."""

    def _make(handler) -> LLMClient:
        return LLMClient(
            base_url="https://llm.test/v1",
            api_key="test-key",
            model="test-model",
            timeout=5,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def llm_returning(make_llm):
    """Build an LLM client that always answers with ``content``."""

    def _make(content) -> LLMClient:
        return make_llm(lambda request: httpx.Response(200, json=chat_response(content)))

    return _make


# Utility fixtures
@pytest.fixture
def kv_store(tmp_path) -> KeyValueStore:
    """A key-value store in a temporary directory."""
    return KeyValueStore(tmp_path / "kv.db")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI runner for command tests."""
    return CliRunner()


@pytest.fixture
def isolated_db(tmp_path, monkeypatch) -> Database:
    """Provide a database instance isolated to a temporary directory."""
    data_dir = tmp_path / "data"
    db_path = data_dir / "daytrack.db"

    for attr, value in (
        ("data_dir", data_dir),
        ("db_path", db_path),
    ):
        monkeypatch.setattr(config_module.config, attr, value)

    test_db = Database(db_path=db_path)

    modules_to_patch = [
        "daytrack.data.database",
        "daytrack.cli.app",
        "daytrack.cli.commands.journal",
        "daytrack.cli.commands.exercise",
        "daytrack.cli.commands.habit",
        "daytrack.cli.commands.expense",
        "daytrack.cli.commands.stats",
        "daytrack.cli.commands.ai",
    ]
    for module_name in modules_to_patch:
        module = importlib.import_module(module_name)
        monkeypatch.setattr(module, "db", test_db)

    return test_db
