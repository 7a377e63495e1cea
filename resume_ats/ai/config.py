import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    optimizer_model: str
    embedding_provider: str
    embedding_model: str


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = os.getenv("AI_MODEL", "gpt-4o-mini").strip()
    optimizer_model = (os.getenv("AI_OPTIMIZER_MODEL") or "gpt-4o").strip()
    embedding_provider = os.getenv("AI_EMBEDDING_PROVIDER", provider).strip().lower()
    embedding_model = os.getenv("AI_EMBEDDING_MODEL", "text-embedding-3-small").strip()
    return AIConfig(
        provider=provider,
        model=model,
        optimizer_model=optimizer_model,
        embedding_provider=embedding_provider,
        embedding_model=embedding_model,
    )
