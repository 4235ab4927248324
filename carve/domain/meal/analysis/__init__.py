"""Food analysis domain: request/result models, prompts, parsing, ports."""

from carve.domain.meal.analysis.models import (
    AnalysisOutcome,
    AnalysisRequest,
    AnalysisResult,
)

__all__ = [
    "AnalysisOutcome",
    "AnalysisRequest",
    "AnalysisResult",
]
