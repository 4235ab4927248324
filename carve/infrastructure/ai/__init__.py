"""Chat-completion client for nutrition analysis."""

from carve.infrastructure.ai.analysis_client import FoodAnalysisClient
from carve.infrastructure.ai.throttle import RequestThrottle

__all__ = [
    "FoodAnalysisClient",
    "RequestThrottle",
]
