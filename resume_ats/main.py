import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from resume_ats.api.v1.ats import router as ats_router
from resume_ats.api.v1.health import router as health_router
from resume_ats.api.v1.match import router as match_router
from resume_ats.api.v1.portfolio import router as portfolio_router
from resume_ats.core.config import settings
from resume_ats.core.lifespan import lifespan
from resume_ats.core.rate_limit import limiter

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Resume ATS API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(portfolio_router, prefix="/v1", tags=["Portfolio"])
app.include_router(ats_router, prefix="/v1", tags=["ATS"])
app.include_router(match_router, prefix="/v1", tags=["Job Match"])
