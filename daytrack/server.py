from typing import Annotated

from fastapi import Depends, FastAPI
from pydantic import BaseModel, ConfigDict, Field

from daytrack import __version__
from daytrack.core.extraction import ExtractionResult
from daytrack.data.llm import LLMClient, llm
from daytrack.utils.exceptions import ExtractionFailure

app = FastAPI(title="DayTrack Extraction API", version=__version__)

# --- Models ---


class ExtractRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    journal_text: str = Field(alias="journalText", min_length=1)
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    mood: str | None = None


class MoodRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    journal_text: str = Field(alias="journalText", min_length=1)


class ExtractResponse(BaseModel):
    success: bool
    extraction: ExtractionResult | None = None
    error: str | None = None


class MoodResponse(BaseModel):
    mood: str | None = None


# --- Dependencies ---


def get_llm_client() -> LLMClient:
    return llm


# --- Endpoints ---


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/extraction/extract", response_model=ExtractResponse)
async def extract(
    request: ExtractRequest, client: Annotated[LLMClient, Depends(get_llm_client)]
):
    # Extraction failures are reported in the body, not as HTTP errors
    try:
        result = await client.extract(request.journal_text, request.date, request.mood)
    except ExtractionFailure as e:
        return ExtractResponse(success=False, error=e.message)
    return ExtractResponse(success=True, extraction=result)


@app.post("/extraction/mood", response_model=MoodResponse)
async def extract_mood(
    request: MoodRequest, client: Annotated[LLMClient, Depends(get_llm_client)]
):
    mood = await client.extract_mood(request.journal_text)
    return MoodResponse(mood=mood.value if mood else None)
