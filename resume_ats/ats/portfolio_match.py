from __future__ import annotations

import logging

from resume_ats.ai.types import ChatMessage, TextGenerationClient
from resume_ats.schemas.match import JobMatchResult
from resume_ats.schemas.portfolio import Portfolio

from .extraction import parse_record
from .errors import StructuredExtractionFailure
from .formatting import portfolio_for_matching
from .prompts import JOB_MATCHING_SYSTEM_PROMPT, job_matching_user_prompt

logger = logging.getLogger(__name__)


def _known(ids: list[str], allowed: set[str]) -> list[str]:
    return [item_id for item_id in dict.fromkeys(ids) if item_id in allowed]


async def match_job_to_portfolio(
    client: TextGenerationClient,
    job_description: str,
    portfolio: Portfolio,
    *,
    model: str | None = None,
) -> JobMatchResult:
    """Pick the portfolio items most relevant to a job description.

    Ids the model returns that do not exist in the portfolio are dropped.
    """
    messages = [
        ChatMessage(role="system", content=JOB_MATCHING_SYSTEM_PROMPT),
        ChatMessage(role="user", content=job_matching_user_prompt(job_description, portfolio_for_matching(portfolio))),
    ]
    try:
        raw = await client.complete(messages, model=model, temperature=0.2, json_mode=True)
    except Exception as exc:  # noqa: BLE001
        logger.warning("ats_match_call_failed: %s", exc)
        raise StructuredExtractionFailure("Text generation failed while matching the portfolio.") from exc

    result = parse_record(raw, JobMatchResult, what="portfolio match")
    ids = portfolio.item_ids()
    filtered = result.model_copy(
        update={
            "work_experience_ids": _known(result.work_experience_ids, ids["work_experience"]),
            "education_ids": _known(result.education_ids, ids["education"]),
            "project_ids": _known(result.project_ids, ids["project"]),
            "achievement_ids": _known(result.achievement_ids, ids["achievement"]),
            "skill_ids": _known(result.skill_ids, ids["skill"]),
        }
    )
    dropped = sum(
        len(getattr(result, field)) - len(getattr(filtered, field))
        for field in ("work_experience_ids", "education_ids", "project_ids", "achievement_ids", "skill_ids")
    )
    if dropped:
        logger.info("ats_match_dropped_unknown_ids count=%s", dropped)
    return filtered
