from __future__ import annotations

import logging
import math

from resume_ats.ai.types import EmbeddingClient

from .errors import EmbeddingServiceFailure

logger = logging.getLogger(__name__)

EMPTY_TEXT_PLACEHOLDER = "empty"


class EmbeddingService:
    """Maps a token bag to a vector through the external embedding service."""

    def __init__(self, client: EmbeddingClient) -> None:
        self._client = client

    async def embed(self, text: str) -> list[float]:
        payload = text if text and text.strip() else EMPTY_TEXT_PLACEHOLDER
        try:
            vector = await self._client.embed(payload)
        except Exception as exc:  # noqa: BLE001 - callers degrade on any provider error
            raise EmbeddingServiceFailure(f"Embedding call failed: {exc}") from exc
        if not vector:
            raise EmbeddingServiceFailure("Embedding service returned no vector.")
        return [float(value) for value in vector]


def cosine_similarity(left: list[float], right: list[float]) -> float:
    if len(left) != len(right):
        raise ValueError("vectors must have the same length")
    dot = sum(a * b for a, b in zip(left, right))
    left_norm = math.sqrt(sum(a * a for a in left))
    right_norm = math.sqrt(sum(b * b for b in right))
    if left_norm <= 0 or right_norm <= 0:
        return 0.0
    return dot / (left_norm * right_norm)
