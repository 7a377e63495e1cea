from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from .analysis import AnalysisRecord
from .optimized import OptimizationResult

_JD_MAX_CHARS = 120000


class PortfolioSavedResponse(BaseModel):
    user_id: str
    updated_at: datetime


class AnalyzeRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=200)
    resume_id: str | None = Field(default=None, max_length=200)
    job_description: str = Field(min_length=30, max_length=_JD_MAX_CHARS)


class OptimizeRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=200)
    resume_id: str | None = Field(default=None, max_length=200)
    analysis_id: str | None = Field(default=None, max_length=200)
    job_description: str | None = Field(default=None, min_length=30, max_length=_JD_MAX_CHARS)
    output_format: Literal["markdown", "structured"] = "structured"

    @model_validator(mode="after")
    def _require_analysis_source(self) -> "OptimizeRequest":
        if not self.analysis_id and not self.resume_id and not self.job_description:
            raise ValueError("Provide analysis_id, resume_id or job_description.")
        return self


class MatchJobRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=200)
    job_description: str = Field(min_length=30, max_length=_JD_MAX_CHARS)


class OriginalVersion(BaseModel):
    resume_id: str | None = None
    analysis: AnalysisRecord | None = None


class ModifiedVersion(BaseModel):
    resume: OptimizationResult
    ats_score: float | None = None


class ResumeComparison(BaseModel):
    """An optimized resume next to the latest analysis of the resume it was rewritten from."""

    original: OriginalVersion
    modified: ModifiedVersion
