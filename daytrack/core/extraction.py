"""Extraction contract between journal text and the LLM service.

The request side builds the chat messages and the strict structured-output
schema. The response side validates the model's JSON against the same
shape and keeps only items at or above the confidence threshold.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from daytrack.core.entries import (
    ExerciseType,
    ExpenseCategory,
    HabitFrequency,
    MoodType,
)
from daytrack.utils.exceptions import ExtractionFailure
from daytrack.utils.helpers import generate_id, now_ms
from daytrack.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.4
SECTIONS = ("exercises", "habits", "expenses", "activities")


class ActivityType(str, Enum):
    """Kinds of notable things that happened during the day."""
    ACTIVITY = "activity"
    EVENT = "event"
    MILESTONE = "milestone"


class ExtractedItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    confidence: float = Field(ge=0, le=1)


class ExtractedExercise(ExtractedItem):
    type: ExerciseType
    duration: int = Field(ge=0)  # minutes
    distance: float | None = Field(default=None, ge=0)  # km
    intensity: Literal["light", "moderate", "high"] | None = None
    notes: str | None = None


class ExtractedHabit(ExtractedItem):
    name: str
    completed: bool
    frequency: HabitFrequency | None = None
    notes: str | None = None


class ExtractedExpense(ExtractedItem):
    category: ExpenseCategory
    amount: float = Field(ge=0)
    description: str | None = None


class ExtractedActivity(ExtractedItem):
    type: ActivityType
    title: str
    mood: MoodType | None = None
    tags: list[str] | None = None
    notes: str | None = None


class ExtractionPayload(BaseModel):
    """Validated body of an extraction response, before confidence filtering."""

    exercises: list[ExtractedExercise] = Field(default_factory=list)
    habits: list[ExtractedHabit] = Field(default_factory=list)
    expenses: list[ExtractedExpense] = Field(default_factory=list)
    activities: list[ExtractedActivity] = Field(default_factory=list)


class ExtractionResult(ExtractionPayload):
    """Filtered extraction, stamped with identity and timing."""

    model_config = ConfigDict(populate_by_name=True)

    journal_entry_id: str = Field(alias="journalEntryId")
    extracted_at: int = Field(alias="extractedAt")
    raw_text: str = Field(alias="rawText")
    extraction_model: str = Field(alias="extractionModel")
    processing_time_ms: int = Field(alias="processingTimeMs")

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, section) for section in SECTIONS)


_ITEM_MODELS: dict[str, type[ExtractedItem]] = {
    "exercises": ExtractedExercise,
    "habits": ExtractedHabit,
    "expenses": ExtractedExpense,
    "activities": ExtractedActivity,
}


# Tagged parse result


T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    cause: BaseException | None = None


ParseResult = Union[Ok[ExtractionPayload], Err[ParseFailure]]


# Request side


def _confidence() -> dict:
    return {"type": "number", "minimum": 0, "maximum": 1}


def _enum(enum_cls: type[Enum]) -> dict:
    return {"type": "string", "enum": [member.value for member in enum_cls]}


def _nullable(schema: dict) -> dict:
    # Strict mode wants every property required; optional ones accept null
    nullable = dict(schema, type=[schema["type"], "null"])
    if "enum" in nullable:
        nullable["enum"] = [*nullable["enum"], None]
    return nullable


EXTRACTION_SCHEMA: dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "journal_extraction",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "exercises": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "type": _enum(ExerciseType),
                            "duration": {"type": "integer", "description": "Duration in minutes"},
                            "distance": _nullable({"type": "number", "description": "Distance in km"}),
                            "intensity": _nullable({"type": "string", "enum": ["light", "moderate", "high"]}),
                            "notes": _nullable({"type": "string"}),
                            "confidence": _confidence(),
                        },
                        "required": ["type", "duration", "distance", "intensity", "notes", "confidence"],
                        "additionalProperties": False,
                    },
                },
                "habits": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string", "description": "Name of the habit"},
                            "completed": {"type": "boolean"},
                            "frequency": _nullable(_enum(HabitFrequency)),
                            "notes": _nullable({"type": "string"}),
                            "confidence": _confidence(),
                        },
                        "required": ["name", "completed", "frequency", "notes", "confidence"],
                        "additionalProperties": False,
                    },
                },
                "expenses": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "category": _enum(ExpenseCategory),
                            "amount": {"type": "number", "description": "Amount in currency"},
                            "description": _nullable({"type": "string"}),
                            "confidence": _confidence(),
                        },
                        "required": ["category", "amount", "description", "confidence"],
                        "additionalProperties": False,
                    },
                },
                "activities": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "type": _enum(ActivityType),
                            "title": {"type": "string"},
                            "mood": _nullable(_enum(MoodType)),
                            "tags": _nullable({"type": "array", "items": {"type": "string"}}),
                            "notes": _nullable({"type": "string"}),
                            "confidence": _confidence(),
                        },
                        "required": ["type", "title", "mood", "tags", "notes", "confidence"],
                        "additionalProperties": False,
                    },
                },
            },
            "required": list(SECTIONS),
            "additionalProperties": False,
        },
    },
}

EXTRACTION_SYSTEM_PROMPT = """You are an expert at analyzing journal entries and extracting structured data about activities, habits, expenses, and exercises.

When analyzing a journal entry, extract:
1. **Exercises**: Any physical activities mentioned (running, cycling, gym, yoga, swimming, sports, walking, etc.). Include duration in minutes and any distance if mentioned.
2. **Habits**: Any habits that were completed or attempted (meditation, reading, journaling, studying, etc.).
3. **Expenses**: Any money spent or purchases mentioned (food, transport, entertainment, utilities, health, shopping, etc.).
4. **Activities**: Important events, milestones, or activities that happened during the day.

For each extracted item, assign a confidence score (0-1) based on how clearly it was mentioned in the text:
- 1.0: Explicitly and clearly stated
- 0.8-0.9: Clearly implied or mentioned with specific details
- 0.6-0.7: Somewhat implied or mentioned vaguely
- 0.4-0.5: Weakly implied or uncertain
- Below 0.4: Very uncertain (don't include)

Return ONLY valid JSON matching the schema. Do not include any explanations or markdown."""

MOOD_SYSTEM_PROMPT = (
    "You are an expert at analyzing emotions in text. Read the journal entry and "
    "identify the primary mood in one word. Return ONLY one of these moods: "
    + ", ".join(m.value for m in MoodType)
    + ". Return just the mood word, nothing else."
)


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ExtractionRequestPayload(BaseModel):
    """Body sent to the chat-completions endpoint (model added by the client)."""

    messages: list[ChatMessage]
    response_format: dict[str, Any] | None = None

    def to_request(self, model: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": model,
            "messages": [m.model_dump() for m in self.messages],
        }
        if self.response_format is not None:
            body["response_format"] = self.response_format
        return body


def build_extraction_request(
    journal_text: str, date: str, mood: str | None = None
) -> ExtractionRequestPayload:
    """Build the system/user messages and strict schema for one journal entry."""
    user_prompt = (
        f"Analyze this journal entry from {date} and extract all activities, "
        f"habits, expenses, and exercises mentioned:\n\n{journal_text}\n\n"
    )
    if mood:
        user_prompt += f"Overall mood mentioned: {mood}"

    return ExtractionRequestPayload(
        messages=[
            ChatMessage(role="system", content=EXTRACTION_SYSTEM_PROMPT),
            ChatMessage(role="user", content=user_prompt),
        ],
        response_format=EXTRACTION_SCHEMA,
    )


def build_mood_request(journal_text: str) -> ExtractionRequestPayload:
    """Build the free-text request asking for a single mood word."""
    return ExtractionRequestPayload(
        messages=[
            ChatMessage(role="system", content=MOOD_SYSTEM_PROMPT),
            ChatMessage(role="user", content=journal_text),
        ],
    )


# Response side


def parse_extraction(raw: str | bytes | dict) -> ParseResult:
    """Validate a raw extraction response against the schema.

    Absent or null sections become empty lists. A section that is present
    but not a list, a body that is not JSON, or a top level that is not an
    object fails the whole parse. Single items that do not match their
    item schema are dropped and logged; they do not fail the parse.
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            return Err(ParseFailure(f"response is not valid JSON: {e.msg}", cause=e))
    else:
        data = raw

    if not isinstance(data, dict):
        return Err(ParseFailure(f"expected a JSON object, got {type(data).__name__}"))

    sections: dict[str, list] = {}
    for section, item_model in _ITEM_MODELS.items():
        items = data.get(section)
        if items is None:
            sections[section] = []
            continue
        if not isinstance(items, list):
            return Err(ParseFailure(f"'{section}' must be an array, got {type(items).__name__}"))

        valid = []
        for index, item in enumerate(items):
            try:
                valid.append(item_model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "malformed_extraction_item",
                    section=section,
                    index=index,
                    errors=e.error_count(),
                )
        sections[section] = valid

    unknown = set(data) - set(SECTIONS)
    if unknown:
        logger.warning("unexpected_extraction_fields", fields=sorted(unknown))

    return Ok(ExtractionPayload(**sections))


def apply_confidence_threshold(
    payload: ExtractionPayload, threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
) -> ExtractionPayload:
    """Keep items whose confidence is at least ``threshold``."""
    return ExtractionPayload(
        **{
            section: [item for item in getattr(payload, section) if item.confidence >= threshold]
            for section in SECTIONS
        }
    )


def filter_extraction(
    raw: str | bytes | dict,
    *,
    journal_text: str,
    model: str,
    started_at: float | None = None,
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> ExtractionResult:
    """Validate, filter by confidence and stamp an extraction response.

    Args:
        raw: Message content returned by the model, or its decoded JSON.
        journal_text: The journal text the extraction was made from.
        model: Identifier of the model that produced the response.
        started_at: ``time.monotonic()`` when the request was issued; used
            for ``processing_time_ms``.
        threshold: Minimum confidence an item needs to be kept.

    Raises:
        ExtractionFailure: If the response cannot be parsed at all.
    """
    parsed = parse_extraction(raw)
    if isinstance(parsed, Err):
        raise ExtractionFailure(parsed.error.reason, cause=parsed.error.cause) from parsed.error.cause

    filtered = apply_confidence_threshold(parsed.value, threshold)
    elapsed_ms = 0
    if started_at is not None:
        elapsed_ms = int((time.monotonic() - started_at) * 1000)

    return ExtractionResult(
        **{section: getattr(filtered, section) for section in SECTIONS},
        journal_entry_id=generate_id("entry"),
        extracted_at=now_ms(),
        raw_text=journal_text,
        extraction_model=model,
        processing_time_ms=elapsed_ms,
    )


def parse_mood(content: str | None) -> MoodType | None:
    """Map the model's one-word answer to a mood, or None if it is not one."""
    if not isinstance(content, str):
        return None
    word = content.strip().strip(".!\"'").lower()
    try:
        return MoodType(word)
    except ValueError:
        return None
