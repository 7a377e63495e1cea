from __future__ import annotations

from dataclasses import dataclass

from resume_ats.core.config.scoring import get_scoring_float


@dataclass(frozen=True)
class FusionWeights:
    cosine: float = 40.0
    keyword_match: float = 0.3
    skill_overlap: float = 0.2
    experience_relevance: float = 0.1
    floor: float = 0.0
    ceiling: float = 100.0

    @classmethod
    def from_config(cls) -> "FusionWeights":
        defaults = cls()
        return cls(
            cosine=get_scoring_float("fusion.weights.cosine", defaults.cosine),
            keyword_match=get_scoring_float("fusion.weights.keyword_match", defaults.keyword_match),
            skill_overlap=get_scoring_float("fusion.weights.skill_overlap", defaults.skill_overlap),
            experience_relevance=get_scoring_float(
                "fusion.weights.experience_relevance", defaults.experience_relevance
            ),
            floor=get_scoring_float("fusion.clamp.min", defaults.floor),
            ceiling=get_scoring_float("fusion.clamp.max", defaults.ceiling),
        )


def fuse(
    cosine: float,
    keyword_match: float,
    skill_overlap: float,
    experience_relevance: float,
    weights: FusionWeights | None = None,
) -> float:
    """Weighted overall score, clamped to [0, 100].

    ``cosine`` is on a 0-1 scale, the other three are percentages, so the
    default weights give at most 40 + 30 + 20 + 10 points.
    """
    w = weights or FusionWeights.from_config()
    raw = (
        cosine * w.cosine
        + keyword_match * w.keyword_match
        + skill_overlap * w.skill_overlap
        + experience_relevance * w.experience_relevance
    )
    return min(w.ceiling, max(w.floor, raw))
