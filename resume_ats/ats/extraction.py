from __future__ import annotations

import json
import logging
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from resume_ats.ai.types import ChatMessage, TextGenerationClient
from resume_ats.schemas.job import JobRecord
from resume_ats.schemas.portfolio import Portfolio
from resume_ats.schemas.resume import ResumeRecord

from .errors import StructuredExtractionFailure
from .formatting import portfolio_to_resume_text
from .prompts import EXTRACTION_SYSTEM_PROMPT, job_extraction_prompt, resume_extraction_prompt

logger = logging.getLogger(__name__)

_FENCE_START_RE = re.compile(r"^```[A-Za-z]*[ \t]*\n?")
_FENCE_END_RE = re.compile(r"\n?```$")

RecordT = TypeVar("RecordT", bound=BaseModel)


def strip_code_fences(text: str) -> str:
    """Remove one surrounding ```lang ... ``` wrapper, if present."""
    cleaned = (text or "").strip()
    cleaned = _FENCE_START_RE.sub("", cleaned, count=1)
    cleaned = _FENCE_END_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_record(raw: str, model: type[RecordT], *, what: str) -> RecordT:
    """Parse model output into ``model``; any mismatch is a StructuredExtractionFailure."""
    cleaned = strip_code_fences(raw)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("ats_extraction_invalid_json what=%s chars=%s: %s", what, len(cleaned), exc)
        logger.debug("ats_extraction_raw_text what=%s raw=%r", what, cleaned)
        raise StructuredExtractionFailure(
            f"Failed to extract {what} structure: response is not valid JSON.",
            raw_text=cleaned,
        ) from exc

    if not isinstance(payload, dict):
        logger.warning("ats_extraction_not_an_object what=%s type=%s", what, type(payload).__name__)
        raise StructuredExtractionFailure(
            f"Failed to extract {what} structure: expected a JSON object.",
            raw_text=cleaned,
        )

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.warning("ats_extraction_schema_mismatch what=%s errors=%s", what, exc.error_count())
        logger.debug("ats_extraction_raw_text what=%s raw=%r", what, cleaned)
        raise StructuredExtractionFailure(
            f"Failed to extract {what} structure: {exc.error_count()} schema error(s).",
            raw_text=cleaned,
        ) from exc


class StructuredExtractor:
    """Turns a raw job posting or a portfolio into a validated record via the text-generation service."""

    def __init__(
        self,
        client: TextGenerationClient,
        *,
        model: str | None = None,
        temperature: float = 0.0,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature

    async def extract_job(self, raw_posting: str) -> JobRecord:
        raw = await self._generate(job_extraction_prompt(raw_posting), what="job posting")
        return parse_record(raw, JobRecord, what="job posting")

    async def extract_resume(self, portfolio: Portfolio) -> ResumeRecord:
        return await self.extract_resume_text(portfolio_to_resume_text(portfolio))

    async def extract_resume_text(self, resume_text: str) -> ResumeRecord:
        raw = await self._generate(resume_extraction_prompt(resume_text), what="resume")
        return parse_record(raw, ResumeRecord, what="resume")

    async def _generate(self, prompt: str, *, what: str) -> str:
        messages = [
            ChatMessage(role="system", content=EXTRACTION_SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt),
        ]
        try:
            return await self._client.complete(
                messages,
                model=self._model,
                temperature=self._temperature,
                json_mode=True,
            )
        except Exception as exc:  # noqa: BLE001 - any provider error fails the analysis
            logger.warning("ats_extraction_call_failed what=%s: %s", what, exc)
            raise StructuredExtractionFailure(
                f"Text generation failed while extracting the {what}.",
            ) from exc
