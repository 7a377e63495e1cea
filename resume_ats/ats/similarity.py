from __future__ import annotations

import logging
from collections.abc import Iterable

from resume_ats.schemas.analysis import ScoreResult
from resume_ats.schemas.job import JobRecord
from resume_ats.schemas.resume import ResumeRecord

from .embeddings import EmbeddingService, cosine_similarity
from .errors import EmbeddingServiceFailure
from .fusion import FusionWeights, fuse
from .keywords import extract_keywords
from .tasks import gather_or_cancel

logger = logging.getLogger(__name__)


def contains_match(left: str, right: str) -> bool:
    # Substring containment in either direction, so "java" matches "javascript".
    return left in right or right in left


def has_match(term: str, pool: Iterable[str]) -> bool:
    return any(contains_match(term, candidate) for candidate in pool)


def normalize_terms(terms: Iterable[str]) -> list[str]:
    """Lowercase, drop blanks and de-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(term.strip().lower() for term in terms if term and term.strip()))


def match_percent(needles: list[str], pool: list[str]) -> float:
    if not needles:
        return 0.0
    matched = sum(1 for needle in needles if has_match(needle, pool))
    return matched / len(needles) * 100


def job_keyword_pool(job: JobRecord) -> list[str]:
    terms: list[str] = [
        *job.extracted_keywords,
        *job.qualifications.required,
        *job.qualifications.preferred,
        *sorted(extract_keywords(job.summary)),
        *sorted(extract_keywords(" ".join(job.responsibilities))),
    ]
    return normalize_terms(terms)


def resume_keyword_pool(resume: ResumeRecord) -> list[str]:
    terms: list[str] = [*resume.extracted_keywords, *resume.skill_names]
    for exp in resume.experiences:
        terms.extend(exp.technologies)
        terms.extend(sorted(extract_keywords(" ".join(exp.description))))
    for project in resume.projects:
        terms.extend(project.technologies)
        terms.extend(sorted(extract_keywords(project.description)))
    return normalize_terms(terms)


def job_skill_terms(job: JobRecord) -> list[str]:
    return normalize_terms([*job.qualifications.required, *job.qualifications.preferred])


def keyword_match_percent(job: JobRecord, resume: ResumeRecord) -> float:
    return match_percent(job_keyword_pool(job), resume_keyword_pool(resume))


def skill_overlap_percent(job: JobRecord, resume: ResumeRecord) -> float:
    return match_percent(job_skill_terms(job), normalize_terms(resume.skill_names))


def experience_relevance(job: JobRecord, resume: ResumeRecord) -> float:
    """Average share of job-title words found in each experience title, as a percentage."""
    if not resume.experiences:
        return 0.0
    title_words = job.title.lower().split()
    scores: list[float] = []
    for exp in resume.experiences:
        exp_words = exp.title.lower().split()
        matching = sum(1 for word in title_words if has_match(word, exp_words))
        scores.append(matching / max(len(title_words), 1))
    return sum(scores) / len(scores) * 100


class SimilarityEngine:
    def __init__(self, embeddings: EmbeddingService, weights: FusionWeights | None = None) -> None:
        self._embeddings = embeddings
        self._weights = weights

    async def embedding_similarity(self, job_pool: list[str], resume_pool: list[str]) -> float:
        job_vector, resume_vector = await gather_or_cancel(
            self._embeddings.embed(" ".join(job_pool)),
            self._embeddings.embed(" ".join(resume_pool)),
        )
        try:
            value = cosine_similarity(job_vector, resume_vector)
        except ValueError as exc:
            raise EmbeddingServiceFailure(f"Embedding dimensions differ: {exc}") from exc
        return min(1.0, max(0.0, value))

    async def score(self, job: JobRecord, resume: ResumeRecord) -> ScoreResult:
        job_pool = job_keyword_pool(job)
        resume_pool = resume_keyword_pool(resume)

        keyword_match = match_percent(job_pool, resume_pool)
        skill_overlap = skill_overlap_percent(job, resume)
        relevance = experience_relevance(job, resume)

        try:
            cosine = await self.embedding_similarity(job_pool, resume_pool)
        except EmbeddingServiceFailure as exc:
            logger.warning("ats_embedding_failed fallback=keyword_match: %s", exc)
            cosine = keyword_match / 100

        overall = fuse(cosine, keyword_match, skill_overlap, relevance, self._weights)
        logger.info(
            "ats_scored overall=%.2f cosine=%.4f keywords=%.1f skills=%.1f experience=%.1f",
            overall,
            cosine,
            keyword_match,
            skill_overlap,
            relevance,
        )
        return ScoreResult(
            cosine_similarity=cosine,
            keyword_match_percent=keyword_match,
            skill_overlap_percent=skill_overlap,
            experience_relevance=relevance,
            overall_score=overall,
        )
