from __future__ import annotations

import re
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .base import LLMRecord

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")


def parse_resume_date(value: str | None) -> date | None:
    """Parse YYYY-MM-DD, YYYY-MM or YYYY. ``Present`` and blanks mean an open range."""
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed or trimmed.lower() == "present":
        return None

    try:
        match = _ISO_DATE_RE.match(trimmed)
        if match:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        match = _YEAR_MONTH_RE.match(trimmed)
        if match:
            return date(int(match.group(1)), int(match.group(2)), 1)
        match = _YEAR_RE.match(trimmed)
        if match:
            return date(int(match.group(1)), 1, 1)
    except ValueError:
        return None

    try:
        return datetime.fromisoformat(trimmed).date()
    except ValueError:
        return None


def _require_start_date(value: str) -> str:
    if parse_resume_date(value) is None:
        raise ValueError(f"startDate '{value}' is not a date (expected YYYY-MM-DD)")
    return value.strip()


class ContactInfo(LLMRecord):
    name: str = ""
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    github: str | None = None
    website: str | None = None


class OptimizedWorkExperience(LLMRecord):
    job_title: str = Field(alias="jobTitle")
    company: str
    location: str | None = None
    start_date: str = Field(alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    is_current: bool = Field(default=False, alias="isCurrent")
    bullet_points: list[str] = Field(default_factory=list, alias="bulletPoints")

    @field_validator("start_date")
    @classmethod
    def _validate_start_date(cls, value: str) -> str:
        return _require_start_date(value)


class OptimizedEducation(LLMRecord):
    institution: str
    degree: str
    field_of_study: str = Field(default="", alias="fieldOfStudy")
    gpa: str | None = None
    start_date: str = Field(alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    is_current: bool = Field(default=False, alias="isCurrent")

    @field_validator("start_date")
    @classmethod
    def _validate_start_date(cls, value: str) -> str:
        return _require_start_date(value)


class OptimizedSkill(LLMRecord):
    name: str
    category: str | None = None


class OptimizedProject(LLMRecord):
    name: str
    description: str | None = None
    bullet_points: list[str] = Field(default_factory=list, alias="bulletPoints")
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None


class OptimizedAchievement(LLMRecord):
    title: str
    description: str = ""
    category: str = ""
    date: str | None = None


class OptimizedResume(LLMRecord):
    contact_info: ContactInfo = Field(default_factory=ContactInfo, alias="contactInfo")
    professional_summary: str | None = Field(default=None, alias="professionalSummary")
    work_experiences: list[OptimizedWorkExperience] = Field(default_factory=list, alias="workExperiences")
    educations: list[OptimizedEducation] = Field(default_factory=list)
    skills: list[OptimizedSkill] = Field(default_factory=list)
    projects: list[OptimizedProject] = Field(default_factory=list)
    achievements: list[OptimizedAchievement] = Field(default_factory=list)


class Modification(BaseModel):
    section: str
    change: str
    reason: str


class OptimizationResult(BaseModel):
    optimized_resume_id: str | None = None
    analysis_id: str | None = None
    output_format: Literal["markdown", "structured"]
    markdown: str
    structured: OptimizedResume | None = None
    modifications: list[Modification] = Field(default_factory=list)
    unsupported_terms: list[str] = Field(default_factory=list)
    ats_score: float | None = None
