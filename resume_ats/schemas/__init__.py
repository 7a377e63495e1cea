from .analysis import (
    AnalysisEvent,
    AnalysisRecord,
    Recommendation,
    RecommendationSet,
    ScoreResult,
)
from .job import JobRecord, Qualifications
from .match import JobMatchResult
from .optimized import Modification, OptimizationResult, OptimizedResume
from .portfolio import Portfolio
from .resume import ExperienceEntry, ProjectEntry, ResumeRecord, SkillEntry

__all__ = [
    "AnalysisEvent",
    "AnalysisRecord",
    "ExperienceEntry",
    "JobMatchResult",
    "JobRecord",
    "Modification",
    "OptimizationResult",
    "OptimizedResume",
    "Portfolio",
    "ProjectEntry",
    "Qualifications",
    "Recommendation",
    "RecommendationSet",
    "ResumeRecord",
    "ScoreResult",
    "SkillEntry",
]
