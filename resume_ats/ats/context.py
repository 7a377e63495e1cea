from __future__ import annotations

from dataclasses import dataclass

from resume_ats.ai.config import AIConfig, load_ai_config
from resume_ats.ai.factory import get_embedding_client, get_text_client
from resume_ats.ai.types import EmbeddingClient, TextGenerationClient
from resume_ats.core.config import settings


@dataclass(frozen=True)
class AtsContext:
    """External services and model choices one analysis or optimization run needs."""

    text_client: TextGenerationClient
    embedding_client: EmbeddingClient
    extraction_model: str | None = None
    optimizer_model: str | None = None
    strict_facts: bool = False


def build_ats_context(cfg: AIConfig | None = None) -> AtsContext:
    cfg = cfg or load_ai_config()
    text_client = get_text_client(cfg)
    if cfg.embedding_provider == cfg.provider == "openai":
        embedding_client: EmbeddingClient = text_client  # type: ignore[assignment]
    else:
        embedding_client = get_embedding_client(cfg)
    return AtsContext(
        text_client=text_client,
        embedding_client=embedding_client,
        extraction_model=cfg.model,
        optimizer_model=cfg.optimizer_model,
        strict_facts=settings.optimizer_strict_facts,
    )
