from resume_ats.ai.config import AIConfig, load_ai_config
from resume_ats.ai.providers.hashing_provider import HashingEmbeddingProvider
from resume_ats.ai.providers.openai_provider import OpenAIProvider
from resume_ats.ai.types import EmbeddingClient, TextGenerationClient


def get_text_client(cfg: AIConfig | None = None) -> TextGenerationClient:
    cfg = cfg or load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, embedding_model=cfg.embedding_model)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")


def get_embedding_client(cfg: AIConfig | None = None) -> EmbeddingClient:
    cfg = cfg or load_ai_config()

    if cfg.embedding_provider == "openai":
        return OpenAIProvider(model=cfg.model, embedding_model=cfg.embedding_model)

    if cfg.embedding_provider == "hashing":
        return HashingEmbeddingProvider()

    raise ValueError(f"Unsupported AI_EMBEDDING_PROVIDER='{cfg.embedding_provider}'")
