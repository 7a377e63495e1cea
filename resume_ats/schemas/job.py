from __future__ import annotations

from pydantic import Field, field_validator

from .base import LLMRecord, coerce_str_list


class CompanyProfile(LLMRecord):
    company_name: str = Field(default="", alias="companyName")
    industry: str = ""
    website: str = ""
    description: str = ""


class JobLocation(LLMRecord):
    city: str = ""
    state: str = ""
    country: str = ""
    remote_status: str = Field(default="Not Specified", alias="remoteStatus")


class Qualifications(LLMRecord):
    required: list[str] = Field(default_factory=list)
    preferred: list[str] = Field(default_factory=list)

    @field_validator("required", "preferred", mode="before")
    @classmethod
    def _coerce_lists(cls, value):
        return coerce_str_list(value)


class Compensation(LLMRecord):
    salary_range: str = Field(default="", alias="salaryRange")
    benefits: list[str] = Field(default_factory=list)


class ApplicationInfo(LLMRecord):
    how_to_apply: str = Field(default="", alias="howToApply")
    apply_link: str = Field(default="", alias="applyLink")
    contact_email: str = Field(default="", alias="contactEmail")


class JobRecord(LLMRecord):
    job_id: str = Field(default="", alias="jobId")
    title: str = Field(default="", alias="jobTitle")
    company_profile: CompanyProfile = Field(default_factory=CompanyProfile, alias="companyProfile")
    location: JobLocation = Field(default_factory=JobLocation)
    date_posted: str = Field(default="", alias="datePosted")
    employment_type: str = Field(default="Not Specified", alias="employmentType")
    summary: str = Field(default="", alias="jobSummary")
    responsibilities: list[str] = Field(default_factory=list, alias="keyResponsibilities")
    qualifications: Qualifications = Field(default_factory=Qualifications)
    compensation: Compensation = Field(default_factory=Compensation, alias="compensationAndBenefits")
    application_info: ApplicationInfo = Field(default_factory=ApplicationInfo, alias="applicationInfo")
    extracted_keywords: list[str] = Field(default_factory=list, alias="extractedKeywords")

    @field_validator("responsibilities", "extracted_keywords", mode="before")
    @classmethod
    def _coerce_lists(cls, value):
        return coerce_str_list(value)
