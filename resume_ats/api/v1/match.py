import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from resume_ats.api.v1.deps import get_analysis_store, get_ats_context
from resume_ats.ats.context import AtsContext
from resume_ats.ats.errors import AtsError
from resume_ats.ats.pipeline import require_portfolio
from resume_ats.ats.portfolio_match import match_job_to_portfolio
from resume_ats.core.config import settings
from resume_ats.core.rate_limit import rate_limit
from resume_ats.core.security import require_api_key
from resume_ats.schemas.api import MatchJobRequest
from resume_ats.schemas.match import JobMatchResult
from resume_ats.storage.analysis_store import AnalysisStore

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/match-job", response_model=JobMatchResult, response_model_by_alias=True)
@rate_limit(settings.analysis_rate_limit)
async def match_job(
    request: Request,
    payload: MatchJobRequest,
    ctx: AtsContext = Depends(get_ats_context),
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    try:
        portfolio = require_portfolio(store, payload.user_id)
        return await asyncio.wait_for(
            match_job_to_portfolio(ctx.text_client, payload.job_description, portfolio, model=ctx.extraction_model),
            timeout=settings.analysis_timeout_s,
        )
    except AtsError as exc:
        logger.warning("match_job_failed user=%s status=%s: %s", payload.user_id, exc.status_code, exc)
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    except asyncio.TimeoutError as exc:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail="Job matching did not finish in time. Please try again.",
        ) from exc
