from .analysis_store import AnalysisStore

__all__ = ["AnalysisStore"]
