from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Literal

from resume_ats.schemas.analysis import AnalysisEvent, AnalysisRecord
from resume_ats.schemas.api import ModifiedVersion, OriginalVersion, ResumeComparison
from resume_ats.schemas.optimized import OptimizationResult
from resume_ats.schemas.portfolio import Portfolio
from resume_ats.storage.analysis_store import AnalysisStore, new_id

from .context import AtsContext
from .embeddings import EmbeddingService
from .errors import MissingPrerequisiteData
from .extraction import StructuredExtractor
from .optimizer import ResumeOptimizer
from .recommendations import recommend
from .similarity import SimilarityEngine
from .tasks import gather_or_cancel

logger = logging.getLogger(__name__)


def require_portfolio(store: AnalysisStore, user_id: str) -> Portfolio:
    portfolio = store.get_portfolio(user_id)
    if portfolio is None:
        raise MissingPrerequisiteData(f"No portfolio found for user '{user_id}'.")
    return portfolio


async def iter_analysis(
    ctx: AtsContext,
    *,
    user_id: str,
    job_description: str,
    portfolio: Portfolio,
    resume_id: str | None = None,
    store: AnalysisStore | None = None,
) -> AsyncIterator[AnalysisEvent]:
    """Extract, score and recommend, yielding progress events.

    The final event carries the full record. With a store, the record is
    written once, after every metric and the recommendation set exist;
    any failure before that propagates and nothing is written.
    """
    extractor = StructuredExtractor(ctx.text_client, model=ctx.extraction_model)
    engine = SimilarityEngine(EmbeddingService(ctx.embedding_client))

    yield AnalysisEvent(type="progress", message="Extracting job posting and resume structure")
    job, resume = await gather_or_cancel(
        extractor.extract_job(job_description),
        extractor.extract_resume(portfolio),
    )

    yield AnalysisEvent(type="progress", message="Scoring resume against the job")
    scores = await engine.score(job, resume)

    yield AnalysisEvent(type="progress", message="Generating recommendations")
    rec_set = recommend(job, resume, scores)

    record = AnalysisRecord(
        analysis_id=new_id(),
        user_id=user_id,
        resume_id=resume_id,
        job_description=job_description,
        job=job,
        resume=resume,
        scores=scores,
        recommendations=rec_set.recommendations,
        priority_keywords=rec_set.priority_keywords,
        missing_skills=rec_set.missing_skills,
        created_at=datetime.now(timezone.utc),
    )
    if store is not None:
        store.save_analysis(record)
    logger.info(
        "ats_analysis_complete analysis_id=%s overall=%.2f recommendations=%s",
        record.analysis_id,
        scores.overall_score,
        len(record.recommendations),
    )
    yield AnalysisEvent(type="complete", analysis=record)


async def run_analysis(
    ctx: AtsContext,
    *,
    user_id: str,
    job_description: str,
    portfolio: Portfolio,
    resume_id: str | None = None,
    store: AnalysisStore | None = None,
) -> AnalysisRecord:
    record: AnalysisRecord | None = None
    async for event in iter_analysis(
        ctx,
        user_id=user_id,
        job_description=job_description,
        portfolio=portfolio,
        resume_id=resume_id,
        store=store,
    ):
        if event.type == "complete":
            record = event.analysis
    if record is None:
        raise RuntimeError("analysis finished without a result")
    return record


async def _resolve_analysis(
    ctx: AtsContext,
    store: AnalysisStore,
    *,
    user_id: str,
    portfolio: Portfolio,
    analysis_id: str | None,
    resume_id: str | None,
    job_description: str | None,
) -> AnalysisRecord:
    if analysis_id:
        analysis = store.get_analysis(analysis_id)
        if analysis is None or analysis.user_id != user_id:
            raise MissingPrerequisiteData(f"Analysis '{analysis_id}' not found.")
        return analysis

    if job_description:
        return await run_analysis(
            ctx,
            user_id=user_id,
            job_description=job_description,
            portfolio=portfolio,
            resume_id=resume_id,
            store=store,
        )

    analysis = store.latest_analysis(user_id, resume_id)
    if analysis is None:
        raise MissingPrerequisiteData("No prior analysis found; provide a job description to analyze first.")
    return analysis


async def run_optimization(
    ctx: AtsContext,
    store: AnalysisStore,
    *,
    user_id: str,
    analysis_id: str | None = None,
    resume_id: str | None = None,
    job_description: str | None = None,
    output_format: Literal["markdown", "structured"] = "structured",
) -> OptimizationResult:
    """Rewrite the user's resume for a prior (or freshly computed) analysis and persist the result."""
    portfolio = require_portfolio(store, user_id)
    analysis = await _resolve_analysis(
        ctx,
        store,
        user_id=user_id,
        portfolio=portfolio,
        analysis_id=analysis_id,
        resume_id=resume_id,
        job_description=job_description,
    )

    optimizer = ResumeOptimizer(ctx.text_client, model=ctx.optimizer_model, strict_facts=ctx.strict_facts)
    optimize = optimizer.optimize if output_format == "markdown" else optimizer.optimize_structured
    result = await optimize(
        analysis.job_description,
        analysis.job,
        analysis.resume,
        portfolio,
        analysis.scores,
        analysis.recommendations,
        analysis.priority_keywords,
        analysis.missing_skills,
    )
    result = result.model_copy(update={"analysis_id": analysis.analysis_id})
    optimized_resume_id = store.save_optimized_resume(user_id, result)
    logger.info(
        "ats_optimization_complete analysis_id=%s optimized_resume_id=%s format=%s unsupported=%s",
        analysis.analysis_id,
        optimized_resume_id,
        output_format,
        len(result.unsupported_terms),
    )
    return result.model_copy(update={"optimized_resume_id": optimized_resume_id})


def compare_versions(store: AnalysisStore, *, user_id: str, optimized_resume_id: str) -> ResumeComparison:
    optimized = store.get_optimized_resume(optimized_resume_id, user_id=user_id)
    if optimized is None:
        raise MissingPrerequisiteData(f"Optimized resume '{optimized_resume_id}' not found.")

    original = OriginalVersion()
    source = store.get_analysis(optimized.analysis_id) if optimized.analysis_id else None
    if source is not None:
        latest = store.latest_analysis(user_id, source.resume_id)
        original = OriginalVersion(resume_id=source.resume_id, analysis=latest or source)
    return ResumeComparison(
        original=original,
        modified=ModifiedVersion(resume=optimized, ats_score=optimized.ats_score),
    )
