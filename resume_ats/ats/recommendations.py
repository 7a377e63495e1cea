from __future__ import annotations

import logging
from dataclasses import dataclass

from resume_ats.core.config.scoring import get_scoring_float, get_scoring_int
from resume_ats.schemas.analysis import Recommendation, RecommendationSet, ScoreResult
from resume_ats.schemas.job import JobRecord
from resume_ats.schemas.resume import ResumeRecord

from .similarity import has_match, job_skill_terms, normalize_terms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationPolicy:
    keyword_match_threshold: float = 50.0
    skill_overlap_threshold: float = 60.0
    experience_relevance_threshold: float = 50.0
    top_job_keywords: int = 10
    max_recommendations: int = 10
    max_priority_keywords: int = 15
    max_missing_skills: int = 10

    @classmethod
    def from_config(cls) -> "RecommendationPolicy":
        d = cls()
        return cls(
            keyword_match_threshold=get_scoring_float(
                "recommendations.thresholds.keyword_match", d.keyword_match_threshold
            ),
            skill_overlap_threshold=get_scoring_float(
                "recommendations.thresholds.skill_overlap", d.skill_overlap_threshold
            ),
            experience_relevance_threshold=get_scoring_float(
                "recommendations.thresholds.experience_relevance", d.experience_relevance_threshold
            ),
            top_job_keywords=get_scoring_int("recommendations.top_job_keywords", d.top_job_keywords),
            max_recommendations=get_scoring_int("recommendations.limits.recommendations", d.max_recommendations),
            max_priority_keywords=get_scoring_int(
                "recommendations.limits.priority_keywords", d.max_priority_keywords
            ),
            max_missing_skills=get_scoring_int("recommendations.limits.missing_skills", d.max_missing_skills),
        )


def recommend(
    job: JobRecord,
    resume: ResumeRecord,
    scores: ScoreResult,
    policy: RecommendationPolicy | None = None,
) -> RecommendationSet:
    """Gap-closing suggestions, ordered skills first, then keywords, then score thresholds.

    Truncation keeps the first N of each list; nothing is re-ranked.
    """
    policy = policy or RecommendationPolicy.from_config()
    recommendations: list[Recommendation] = []
    priority_keywords: list[str] = []
    missing_skills: list[str] = []

    required = set(normalize_terms(job.qualifications.required))
    resume_skills = normalize_terms(resume.skill_names)
    for skill in job_skill_terms(job):
        if has_match(skill, resume_skills):
            continue
        missing_skills.append(skill)
        recommendations.append(
            Recommendation(
                category="skill",
                suggestion=f'Add "{skill}" to your skills section',
                priority="high" if skill in required else "medium",
            )
        )

    resume_keywords = normalize_terms(resume.extracted_keywords)
    for keyword in normalize_terms(job.extracted_keywords)[: policy.top_job_keywords]:
        if has_match(keyword, resume_keywords):
            continue
        priority_keywords.append(keyword)
        recommendations.append(
            Recommendation(
                category="general",
                suggestion=f'Incorporate the keyword "{keyword}" naturally into your resume',
                priority="medium",
            )
        )

    if scores.keyword_match_percent < policy.keyword_match_threshold:
        recommendations.append(
            Recommendation(
                category="general",
                suggestion=(
                    "Increase keyword density by incorporating more job-relevant terms throughout your resume"
                ),
                priority="high",
            )
        )
    if scores.skill_overlap_percent < policy.skill_overlap_threshold:
        recommendations.append(
            Recommendation(
                category="skill",
                suggestion="Add more required and preferred skills to better match the job requirements",
                priority="high",
            )
        )
    if scores.experience_relevance < policy.experience_relevance_threshold:
        recommendations.append(
            Recommendation(
                category="work_experience",
                suggestion="Reframe your work experience to better align with the job title and responsibilities",
                priority="medium",
            )
        )

    logger.debug(
        "ats_recommendations total=%s missing_skills=%s priority_keywords=%s",
        len(recommendations),
        len(missing_skills),
        len(priority_keywords),
    )
    return RecommendationSet(
        recommendations=recommendations[: policy.max_recommendations],
        priority_keywords=priority_keywords[: policy.max_priority_keywords],
        missing_skills=missing_skills[: policy.max_missing_skills],
    )
