import asyncio
import json
import logging
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse

from resume_ats.api.v1.deps import get_analysis_store, get_ats_context
from resume_ats.ats.context import AtsContext
from resume_ats.ats.errors import AtsError
from resume_ats.ats.pipeline import (
    compare_versions,
    iter_analysis,
    require_portfolio,
    run_analysis,
    run_optimization,
)
from resume_ats.core.config import settings
from resume_ats.core.rate_limit import rate_limit
from resume_ats.core.security import require_api_key
from resume_ats.schemas.analysis import AnalysisRecord
from resume_ats.schemas.api import AnalyzeRequest, OptimizeRequest, ResumeComparison
from resume_ats.schemas.optimized import OptimizationResult
from resume_ats.storage.analysis_store import AnalysisStore

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


def _raise_ats_error(exc: AtsError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


def _raise_timeout(exc: asyncio.TimeoutError, what: str) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        detail=f"{what} did not finish in time. Please try again.",
    ) from exc


def _sse_event(event: str, payload: dict[str, Any]) -> str:
    data = json.dumps(payload, ensure_ascii=False)
    return f"event: {event}\ndata: {data}\n\n"


@router.post("/ats/analyze", response_model=AnalysisRecord)
@rate_limit(settings.analysis_rate_limit)
async def analyze(
    request: Request,
    payload: AnalyzeRequest,
    ctx: AtsContext = Depends(get_ats_context),
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    try:
        portfolio = require_portfolio(store, payload.user_id)
        return await asyncio.wait_for(
            run_analysis(
                ctx,
                user_id=payload.user_id,
                job_description=payload.job_description,
                portfolio=portfolio,
                resume_id=payload.resume_id,
                store=store,
            ),
            timeout=settings.analysis_timeout_s,
        )
    except AtsError as exc:
        logger.warning("ats_analyze_failed user=%s status=%s: %s", payload.user_id, exc.status_code, exc)
        _raise_ats_error(exc)
    except asyncio.TimeoutError as exc:
        logger.warning("ats_analyze_timeout user=%s budget_s=%s", payload.user_id, settings.analysis_timeout_s)
        _raise_timeout(exc, "Analysis")


@router.post("/ats/analyze/stream")
@rate_limit(settings.analysis_rate_limit)
async def analyze_stream(
    request: Request,
    payload: AnalyzeRequest,
    ctx: AtsContext = Depends(get_ats_context),
    store: AnalysisStore = Depends(get_analysis_store),
):
    async def event_stream():
        loop = asyncio.get_running_loop()
        deadline = loop.time() + settings.analysis_timeout_s
        events = None
        try:
            portfolio = require_portfolio(store, payload.user_id)
            events = iter_analysis(
                ctx,
                user_id=payload.user_id,
                job_description=payload.job_description,
                portfolio=portfolio,
                resume_id=payload.resume_id,
                store=store,
            )
            while True:
                if await request.is_disconnected():
                    break
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise asyncio.TimeoutError
                try:
                    event = await asyncio.wait_for(events.__anext__(), timeout=remaining)
                except StopAsyncIteration:
                    break
                yield _sse_event(event.type, event.model_dump(mode="json", exclude_none=True))
        except AtsError as exc:
            logger.warning("ats_analyze_stream_failed user=%s status=%s: %s", payload.user_id, exc.status_code, exc)
            yield _sse_event("error", {"type": "error", "error": str(exc), "status": exc.status_code})
        except asyncio.TimeoutError:
            logger.warning("ats_analyze_stream_timeout user=%s", payload.user_id)
            yield _sse_event(
                "error",
                {
                    "type": "error",
                    "error": "Analysis did not finish in time. Please try again.",
                    "status": status.HTTP_504_GATEWAY_TIMEOUT,
                },
            )
        except Exception as exc:  # pragma: no cover - guard rail
            logger.exception("ats_analyze_stream_crashed user=%s", payload.user_id)
            yield _sse_event(
                "error",
                {"type": "error", "error": str(exc), "status": status.HTTP_500_INTERNAL_SERVER_ERROR},
            )
        finally:
            if events is not None:
                await events.aclose()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/ats/analyses/{analysis_id}", response_model=AnalysisRecord)
@rate_limit()
async def get_analysis(
    request: Request,
    analysis_id: str,
    user_id: str = Query(min_length=1, max_length=200),
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    record = store.get_analysis(analysis_id)
    if record is None or record.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found.")
    return record


@router.post("/ats/optimize", response_model=OptimizationResult)
@rate_limit(settings.analysis_rate_limit)
async def optimize(
    request: Request,
    payload: OptimizeRequest,
    ctx: AtsContext = Depends(get_ats_context),
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    try:
        return await asyncio.wait_for(
            run_optimization(
                ctx,
                store,
                user_id=payload.user_id,
                analysis_id=payload.analysis_id,
                resume_id=payload.resume_id,
                job_description=payload.job_description,
                output_format=payload.output_format,
            ),
            timeout=settings.optimize_timeout_s,
        )
    except AtsError as exc:
        logger.warning("ats_optimize_failed user=%s status=%s: %s", payload.user_id, exc.status_code, exc)
        _raise_ats_error(exc)
    except asyncio.TimeoutError as exc:
        logger.warning("ats_optimize_timeout user=%s budget_s=%s", payload.user_id, settings.optimize_timeout_s)
        _raise_timeout(exc, "Optimization")


@router.get("/ats/optimized-resumes", response_model=list[OptimizationResult])
@rate_limit()
async def list_optimized_resumes(
    request: Request,
    user_id: str = Query(min_length=1, max_length=200),
    resume_id: str | None = Query(default=None, max_length=200),
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    return store.list_optimized_resumes(user_id, resume_id)


@router.get("/ats/optimized-resumes/{optimized_resume_id}/compare", response_model=ResumeComparison)
@rate_limit()
async def compare_optimized_resume(
    request: Request,
    optimized_resume_id: str,
    user_id: str = Query(min_length=1, max_length=200),
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    try:
        return compare_versions(store, user_id=user_id, optimized_resume_id=optimized_resume_id)
    except AtsError as exc:
        logger.warning("ats_compare_failed user=%s optimized_resume_id=%s: %s", user_id, optimized_resume_id, exc)
        _raise_ats_error(exc)
