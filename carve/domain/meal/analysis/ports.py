"""
Ports (Interfaces) for the food analysis pipeline.

Collaborators the analysis client and the application handlers depend on.
Infrastructure provides the adapters; tests provide fakes.

Design Pattern: Ports & Adapters (Hexagonal Architecture)
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, List, Protocol, runtime_checkable

from carve.domain.meal.analysis.models import (
    AnalysisOutcome,
    AnalysisRequest,
    AnalysisResult,
)

if TYPE_CHECKING:
    from carve.domain.meal.entries.models import FoodEntry


@runtime_checkable
class IConnectivityProbe(Protocol):
    """
    Port for network reachability.

    Polled synchronously before each analysis call.
    """

    def is_connected(self) -> bool:
        """True when the network is reachable."""
        ...


@runtime_checkable
class IImageCodec(Protocol):
    """
    Port for JPEG encoding.

    ``quality`` is a float in [0.1, 1.0].
    """

    def decode(self, data: bytes) -> Any:
        """
        Decode raw image bytes.

        Raises:
            ValueError: If bytes are not a readable image
        """
        ...

    def encode(self, image: Any, quality: float) -> bytes:
        """Encode image as JPEG at the given quality."""
        ...


@runtime_checkable
class IFoodAnalysisClient(Protocol):
    """Port for the nutrition analysis client."""

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze a food description or photo.

        Raises:
            AnalysisError: Typed failure (see errors.AnalysisErrorKind)
        """
        ...

    async def analyze_detailed(self, request: AnalysisRequest) -> AnalysisOutcome:
        """Same as analyze, also returning the image that was sent."""
        ...


@runtime_checkable
class IFoodEntryRepository(Protocol):
    """
    Port for food log persistence.

    Sink for finished analyses. Query semantics belong to the store.
    """

    async def save(self, entry: "FoodEntry") -> None:
        """Persist a food entry."""
        ...

    async def list_for_day(self, day: date) -> List["FoodEntry"]:
        """Entries whose timestamp falls on the given UTC day."""
        ...
