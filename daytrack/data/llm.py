"""Client for the LLM chat-completions service used for journal extraction."""

import time
from typing import Optional

import httpx

from daytrack.core.entries import MoodType
from daytrack.core.extraction import (
    ExtractionRequestPayload,
    ExtractionResult,
    build_extraction_request,
    build_mood_request,
    filter_extraction,
    parse_mood,
)
from daytrack.utils.config import config
from daytrack.utils.exceptions import ExtractionFailure
from daytrack.utils.logger import get_logger

logger = get_logger(__name__)


class LLMClient:
    """Async client for an OpenAI-compatible ``/chat/completions`` endpoint.

    There is no retry; a failed call surfaces as :class:`ExtractionFailure`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        confidence_threshold: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or config.llm_base_url
        self.api_key = api_key if api_key is not None else config.llm_api_key
        self.model = model or config.llm_model
        self.timeout = timeout or config.llm_timeout
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None else config.confidence_threshold
        )
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete(self, request: ExtractionRequestPayload) -> str:
        """Send one chat request and return the first message's content.

        Raises:
            ExtractionFailure: On transport errors, non-2xx responses, a
                body that is not JSON, or a response without content.
        """
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post(
                    "/chat/completions",
                    json=request.to_request(self.model),
                    headers=self._headers(),
                )
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPError as e:
                raise ExtractionFailure(str(e) or type(e).__name__, cause=e) from e
            except ValueError as e:
                raise ExtractionFailure("LLM response body is not JSON", cause=e) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExtractionFailure("No content in LLM response", cause=e) from e
        if not content or not isinstance(content, str):
            raise ExtractionFailure("No content in LLM response")
        return content

    async def extract(
        self, journal_text: str, date: str, mood: Optional[str] = None
    ) -> ExtractionResult:
        """Extract exercises, habits, expenses and activities from journal text.

        Items below the confidence threshold are dropped without error.
        """
        started_at = time.monotonic()
        content = await self.complete(build_extraction_request(journal_text, date, mood))
        result = filter_extraction(
            content,
            journal_text=journal_text,
            model=self.model,
            started_at=started_at,
            threshold=self.confidence_threshold,
        )
        logger.info(
            "journal_extracted",
            date=date,
            exercises=len(result.exercises),
            habits=len(result.habits),
            expenses=len(result.expenses),
            activities=len(result.activities),
            processing_time_ms=result.processing_time_ms,
        )
        return result

    async def extract_mood(self, journal_text: str) -> Optional[MoodType]:
        """Ask the model for the entry's primary mood.

        Returns None when the call fails or the answer is not a known mood.
        """
        try:
            content = await self.complete(build_mood_request(journal_text))
        except ExtractionFailure as e:
            logger.warning("mood_extraction_failed", error=e.message)
            return None
        return parse_mood(content)


# Global client instance
llm = LLMClient()
