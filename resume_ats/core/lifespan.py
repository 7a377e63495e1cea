from contextlib import asynccontextmanager
import logging

from resume_ats.api.v1.deps import get_analysis_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = get_analysis_store()
    store.init()
    logger.info("analysis_store_ready path=%s", store.db_path)
    yield
