from __future__ import annotations

from pydantic import Field

from .base import LLMRecord


class JobMatchResult(LLMRecord):
    work_experience_ids: list[str] = Field(default_factory=list, alias="workExperienceIds")
    education_ids: list[str] = Field(default_factory=list, alias="educationIds")
    project_ids: list[str] = Field(default_factory=list, alias="projectIds")
    achievement_ids: list[str] = Field(default_factory=list, alias="achievementIds")
    skill_ids: list[str] = Field(default_factory=list, alias="skillIds")
    resume_title: str = Field(default="", alias="resumeTitle")
    reasoning: str | None = None
