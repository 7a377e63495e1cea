from __future__ import annotations


class AtsError(RuntimeError):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class StructuredExtractionFailure(AtsError):
    """The text-generation service did not return the expected JSON record."""

    def __init__(self, message: str, *, raw_text: str = ""):
        super().__init__(message, status_code=502)
        self.raw_text = raw_text


class EmbeddingServiceFailure(AtsError):
    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class MissingPrerequisiteData(AtsError):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class OptimizationFailure(AtsError):
    def __init__(self, message: str, *, raw_text: str = ""):
        super().__init__(message, status_code=502)
        self.raw_text = raw_text
