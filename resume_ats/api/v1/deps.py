from __future__ import annotations

from functools import lru_cache

from resume_ats.ats.context import AtsContext, build_ats_context
from resume_ats.core.config import settings
from resume_ats.storage.analysis_store import AnalysisStore


@lru_cache(maxsize=1)
def get_ats_context() -> AtsContext:
    return build_ats_context()


@lru_cache(maxsize=1)
def get_analysis_store() -> AnalysisStore:
    return AnalysisStore(settings.analysis_db_path)
