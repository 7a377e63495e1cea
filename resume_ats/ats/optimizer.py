from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from resume_ats.ai.types import ChatMessage, TextGenerationClient
from resume_ats.core.config.scoring import get_scoring_float, get_scoring_int
from resume_ats.schemas.analysis import Recommendation, ScoreResult
from resume_ats.schemas.job import JobRecord
from resume_ats.schemas.optimized import Modification, OptimizationResult, OptimizedResume
from resume_ats.schemas.portfolio import Portfolio
from resume_ats.schemas.resume import ResumeRecord

from .errors import OptimizationFailure
from .extraction import strip_code_fences
from .fact_guard import find_unsupported_terms
from .formatting import optimized_resume_to_markdown, portfolio_to_markdown
from .prompts import (
    OPTIMIZER_SYSTEM_PROMPT,
    resume_improvement_prompt,
    structured_resume_improvement_prompt,
)

logger = logging.getLogger(__name__)


def format_recommendations(recommendations: list[Recommendation]) -> str:
    return "\n".join(
        f"{index}. [{rec.priority.upper()}] {rec.suggestion}"
        for index, rec in enumerate(recommendations, start=1)
    )


def format_skill_priority(
    priority_keywords: list[str],
    missing_skills: list[str],
    *,
    keyword_limit: int = 5,
    skill_limit: int = 5,
) -> str:
    keywords = "\n".join(f"- {keyword}" for keyword in priority_keywords[:keyword_limit])
    skills = "\n".join(f"- {skill}" for skill in missing_skills[:skill_limit])
    return f"**High Priority Keywords:**\n{keywords}\n\n**Missing Skills to Consider:**\n{skills}"


def build_modifications(recommendations: list[Recommendation], limit: int = 5) -> list[Modification]:
    return [
        Modification(
            section=rec.category,
            change=rec.suggestion,
            reason=f"To improve {rec.priority} priority ATS score",
        )
        for rec in recommendations[:limit]
    ]


class ResumeOptimizer:
    """Rewrites a resume toward a job description without adding new facts.

    The no-fabrication rule is stated in the prompt; ``find_unsupported_terms``
    checks the result afterwards and, with ``strict_facts``, rejects it.
    """

    def __init__(
        self,
        client: TextGenerationClient,
        *,
        model: str | None = None,
        temperature: float | None = None,
        strict_facts: bool = False,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = (
            temperature if temperature is not None else get_scoring_float("optimizer.temperature", 0.3)
        )
        self._strict_facts = strict_facts

    async def optimize(
        self,
        job_description: str,
        job: JobRecord,
        resume: ResumeRecord,
        portfolio: Portfolio,
        scores: ScoreResult,
        recommendations: list[Recommendation],
        priority_keywords: list[str],
        missing_skills: list[str],
    ) -> OptimizationResult:
        source_markdown = portfolio_to_markdown(portfolio)
        prompt = resume_improvement_prompt(
            **self._prompt_context(
                job_description, job, resume, source_markdown, scores,
                recommendations, priority_keywords, missing_skills,
            )
        )
        raw = await self._generate(prompt, json_mode=False)
        markdown = strip_code_fences(raw)
        if not markdown:
            raise OptimizationFailure("Optimization returned empty content.")

        return OptimizationResult(
            output_format="markdown",
            markdown=markdown,
            modifications=self._modifications(recommendations),
            unsupported_terms=self._check_facts(markdown, source_markdown, resume),
            ats_score=scores.overall_score,
        )

    async def optimize_structured(
        self,
        job_description: str,
        job: JobRecord,
        resume: ResumeRecord,
        portfolio: Portfolio,
        scores: ScoreResult,
        recommendations: list[Recommendation],
        priority_keywords: list[str],
        missing_skills: list[str],
    ) -> OptimizationResult:
        source_markdown = portfolio_to_markdown(portfolio)
        prompt = structured_resume_improvement_prompt(
            **self._prompt_context(
                job_description, job, resume, source_markdown, scores,
                recommendations, priority_keywords, missing_skills,
            )
        )
        raw = await self._generate(prompt, json_mode=True)
        structured = self._parse_structured(raw)
        markdown = optimized_resume_to_markdown(structured)

        return OptimizationResult(
            output_format="structured",
            markdown=markdown,
            structured=structured,
            modifications=self._modifications(recommendations),
            unsupported_terms=self._check_facts(markdown, source_markdown, resume),
            ats_score=scores.overall_score,
        )

    def _prompt_context(
        self,
        job_description: str,
        job: JobRecord,
        resume: ResumeRecord,
        source_markdown: str,
        scores: ScoreResult,
        recommendations: list[Recommendation],
        priority_keywords: list[str],
        missing_skills: list[str],
    ) -> dict[str, Any]:
        return {
            "recommendations": format_recommendations(recommendations),
            "skill_priority": format_skill_priority(
                priority_keywords,
                missing_skills,
                keyword_limit=get_scoring_int("optimizer.prompt_priority_keywords", 5),
                skill_limit=get_scoring_int("optimizer.prompt_missing_skills", 5),
            ),
            "cosine_similarity": scores.cosine_similarity,
            "job_description": job_description,
            "job_keywords": ", ".join(job.extracted_keywords),
            "resume_markdown": source_markdown,
            "resume_keywords": ", ".join(resume.extracted_keywords),
        }

    async def _generate(self, prompt: str, *, json_mode: bool) -> str:
        messages = [
            ChatMessage(role="system", content=OPTIMIZER_SYSTEM_PROMPT),
            ChatMessage(role="user", content=prompt),
        ]
        try:
            raw = await self._client.complete(
                messages,
                model=self._model,
                temperature=self._temperature,
                json_mode=json_mode,
            )
        except Exception as exc:  # noqa: BLE001 - any provider error fails the optimize step
            logger.warning("ats_optimize_call_failed: %s", exc)
            raise OptimizationFailure("Text generation failed while optimizing the resume.") from exc
        if not raw or not raw.strip():
            raise OptimizationFailure("Optimization returned empty content.")
        return raw

    @staticmethod
    def _parse_structured(raw: str) -> OptimizedResume:
        cleaned = strip_code_fences(raw)
        try:
            payload = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            logger.warning("ats_optimize_invalid_json chars=%s: %s", len(cleaned), exc)
            raise OptimizationFailure("Optimized resume is not valid JSON.", raw_text=cleaned) from exc
        try:
            return OptimizedResume.model_validate(payload)
        except ValidationError as exc:
            logger.warning("ats_optimize_schema_mismatch errors=%s", exc.error_count())
            raise OptimizationFailure(
                f"Optimized resume does not match the schema: {exc.error_count()} error(s).",
                raw_text=cleaned,
            ) from exc

    @staticmethod
    def _modifications(recommendations: list[Recommendation]) -> list[Modification]:
        return build_modifications(recommendations, limit=get_scoring_int("optimizer.modifications", 5))

    def _check_facts(self, markdown: str, source_markdown: str, resume: ResumeRecord) -> list[str]:
        unsupported = find_unsupported_terms(
            markdown,
            [source_markdown, resume.model_dump_json(by_alias=True)],
        )
        if unsupported:
            logger.warning("ats_optimize_unsupported_terms count=%s terms=%s", len(unsupported), unsupported[:10])
            if self._strict_facts:
                raise OptimizationFailure(
                    "Optimized resume mentions terms not found in the original: " + ", ".join(unsupported[:10]),
                    raw_text=markdown,
                )
        return unsupported
