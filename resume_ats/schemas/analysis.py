from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .job import JobRecord
from .resume import ResumeRecord

RecommendationCategory = Literal[
    "skill",
    "general",
    "work_experience",
    "education",
    "project",
    "achievement",
]
Priority = Literal["high", "medium", "low"]


class ScoreResult(BaseModel):
    cosine_similarity: float = Field(ge=0.0, le=1.0)
    keyword_match_percent: float = Field(ge=0.0, le=100.0)
    skill_overlap_percent: float = Field(ge=0.0, le=100.0)
    experience_relevance: float = Field(ge=0.0, le=100.0)
    overall_score: float = Field(ge=0.0, le=100.0)


class Recommendation(BaseModel):
    category: RecommendationCategory
    item_id: str | None = None
    suggestion: str
    priority: Priority


class RecommendationSet(BaseModel):
    recommendations: list[Recommendation] = Field(default_factory=list)
    priority_keywords: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)


class AnalysisRecord(BaseModel):
    """Everything one analysis run produces; persisted as a single row."""

    analysis_id: str
    user_id: str
    resume_id: str | None = None
    job_description: str
    job: JobRecord
    resume: ResumeRecord
    scores: ScoreResult
    recommendations: list[Recommendation] = Field(default_factory=list)
    priority_keywords: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    created_at: datetime


class AnalysisEvent(BaseModel):
    type: Literal["progress", "complete", "error"]
    message: str | None = None
    analysis: AnalysisRecord | None = None
    error: str | None = None
