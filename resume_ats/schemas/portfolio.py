from __future__ import annotations

import datetime

from pydantic import BaseModel, Field


class PortfolioSkill(BaseModel):
    id: str
    name: str
    category: str | None = None


class WorkExperience(BaseModel):
    id: str
    job_title: str
    company: str
    location: str | None = None
    start_date: datetime.date
    end_date: datetime.date | None = None
    is_current: bool = False
    bullet_points: list[str] = Field(default_factory=list)


class Education(BaseModel):
    id: str
    institution: str
    degree: str
    field_of_study: str
    gpa: str | None = None
    start_date: datetime.date
    end_date: datetime.date | None = None


class Project(BaseModel):
    id: str
    name: str
    description: str | None = None
    bullet_points: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None


class Achievement(BaseModel):
    id: str
    title: str
    description: str
    date: datetime.date | None = None
    category: str


class Portfolio(BaseModel):
    """Read-only snapshot of a user's portfolio as handed to the ATS pipeline."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    github: str | None = None
    website: str | None = None
    work_experiences: list[WorkExperience] = Field(default_factory=list)
    educations: list[Education] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    skills: list[PortfolioSkill] = Field(default_factory=list)

    def item_ids(self) -> dict[str, set[str]]:
        return {
            "work_experience": {item.id for item in self.work_experiences},
            "education": {item.id for item in self.educations},
            "project": {item.id for item in self.projects},
            "achievement": {item.id for item in self.achievements},
            "skill": {item.id for item in self.skills},
        }
