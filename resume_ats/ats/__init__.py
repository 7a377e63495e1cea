from .context import AtsContext, build_ats_context
from .errors import (
    AtsError,
    EmbeddingServiceFailure,
    MissingPrerequisiteData,
    OptimizationFailure,
    StructuredExtractionFailure,
)
from .keywords import extract_keywords
from .pipeline import iter_analysis, run_analysis, run_optimization

__all__ = [
    "AtsContext",
    "AtsError",
    "EmbeddingServiceFailure",
    "MissingPrerequisiteData",
    "OptimizationFailure",
    "StructuredExtractionFailure",
    "build_ats_context",
    "extract_keywords",
    "iter_analysis",
    "run_analysis",
    "run_optimization",
]
