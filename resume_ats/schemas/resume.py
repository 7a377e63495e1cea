from __future__ import annotations

from pydantic import Field, field_validator

from .base import LLMRecord, coerce_joined_str, coerce_str_list


class ResumeLocation(LLMRecord):
    city: str = ""
    country: str = ""


class PersonalData(LLMRecord):
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    portfolio: str = ""
    location: ResumeLocation = Field(default_factory=ResumeLocation)


class ExperienceEntry(LLMRecord):
    title: str = Field(default="", alias="jobTitle")
    company: str = ""
    location: str = ""
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")
    description: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list, alias="technologiesUsed")

    @field_validator("description", "technologies", mode="before")
    @classmethod
    def _coerce_lists(cls, value):
        return coerce_str_list(value)


class ProjectEntry(LLMRecord):
    name: str = Field(default="", alias="projectName")
    description: str = ""
    technologies: list[str] = Field(default_factory=list, alias="technologiesUsed")
    link: str = ""
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value):
        return coerce_joined_str(value)

    @field_validator("technologies", mode="before")
    @classmethod
    def _coerce_lists(cls, value):
        return coerce_str_list(value)


class SkillEntry(LLMRecord):
    category: str = ""
    name: str = Field(default="", alias="skillName")


class ResearchEntry(LLMRecord):
    title: str | None = None
    publication: str | None = None
    date: str | None = None
    link: str | None = None
    description: str | None = None


class EducationEntry(LLMRecord):
    institution: str = ""
    degree: str = ""
    field_of_study: str | None = Field(default=None, alias="fieldOfStudy")
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")
    grade: str = ""
    description: str = ""


class ResumeRecord(LLMRecord):
    uuid: str = Field(default="", alias="UUID")
    personal_data: PersonalData = Field(default_factory=PersonalData, alias="Personal Data")
    experiences: list[ExperienceEntry] = Field(default_factory=list, alias="Experiences")
    projects: list[ProjectEntry] = Field(default_factory=list, alias="Projects")
    skills: list[SkillEntry] = Field(default_factory=list, alias="Skills")
    research_work: list[ResearchEntry] = Field(default_factory=list, alias="Research Work")
    achievements: list[str] = Field(default_factory=list, alias="Achievements")
    education: list[EducationEntry] = Field(default_factory=list, alias="Education")
    extracted_keywords: list[str] = Field(default_factory=list, alias="Extracted Keywords")

    @field_validator("achievements", "extracted_keywords", mode="before")
    @classmethod
    def _coerce_lists(cls, value):
        return coerce_str_list(value)

    @property
    def skill_names(self) -> list[str]:
        return [skill.name for skill in self.skills]
