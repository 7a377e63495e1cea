import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from resume_ats.api.v1.deps import get_analysis_store
from resume_ats.core.rate_limit import rate_limit
from resume_ats.core.security import require_api_key
from resume_ats.schemas.api import PortfolioSavedResponse
from resume_ats.schemas.portfolio import Portfolio
from resume_ats.storage.analysis_store import AnalysisStore

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.put("/portfolios/{user_id}", response_model=PortfolioSavedResponse)
@rate_limit()
async def put_portfolio(
    request: Request,
    user_id: str,
    payload: Portfolio,
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    updated_at = store.save_portfolio(user_id, payload)
    logger.info(
        "portfolio_saved user=%s experiences=%s projects=%s skills=%s",
        user_id,
        len(payload.work_experiences),
        len(payload.projects),
        len(payload.skills),
    )
    return PortfolioSavedResponse(user_id=user_id, updated_at=updated_at)


@router.get("/portfolios/{user_id}", response_model=Portfolio)
@rate_limit()
async def get_portfolio(
    request: Request,
    user_id: str,
    store: AnalysisStore = Depends(get_analysis_store),
):
    _ = request
    portfolio = store.get_portfolio(user_id)
    if portfolio is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Portfolio not found.")
    return portfolio
