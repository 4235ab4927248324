"""
Domain models for the food log.

A FoodEntry is what gets persisted after a successful analysis.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from carve.domain.meal.analysis.models import AnalysisRequest, AnalysisResult

# Default daily goals
DEFAULT_DAILY_CALORIES = 2000
DEFAULT_PROTEIN_GOAL = 150
DEFAULT_CARBS_GOAL = 250
DEFAULT_FAT_GOAL = 65


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FoodEntry(BaseModel):
    """
    Logged food with its nutrition values.

    Attributes:
        id: Entry identifier (hex uuid4)
        name: Food name as entered (or the analysis details)
        description: Analysis details
        amount_grams: Portion size
        calories, protein, carbs, fat: Nutrition values
        image_base64: Compressed photo, if the entry came from one
        timestamp: Creation time (UTC)

    Example:
        >>> entry = FoodEntry.from_analysis(request, result)
        >>> assert entry.description == result.details
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = Field(..., min_length=1)
    description: str = ""
    amount_grams: int = Field(..., gt=0)
    calories: int = Field(..., ge=0)
    protein: int = Field(..., ge=0)
    carbs: int = Field(..., ge=0)
    fat: int = Field(..., ge=0)
    image_base64: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utc_now)

    @property
    def day(self) -> date:
        """UTC calendar day of the entry."""
        ts = self.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return ts.astimezone(timezone.utc).date()

    @classmethod
    def from_analysis(
        cls,
        request: AnalysisRequest,
        result: AnalysisResult,
        image_base64: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> FoodEntry:
        """Combine request metadata and analysis values."""
        name = request.name.strip() or result.details or "Food from image"
        return cls(
            name=name,
            description=result.details,
            amount_grams=request.amount_grams,
            calories=result.calories,
            protein=result.protein,
            carbs=result.carbs,
            fat=result.fat,
            image_base64=image_base64,
            timestamp=timestamp or _utc_now(),
        )


class MacroGoals(BaseModel):
    """Daily targets."""

    model_config = ConfigDict(frozen=True)

    calories: int = Field(DEFAULT_DAILY_CALORIES, ge=0)
    protein: int = Field(DEFAULT_PROTEIN_GOAL, ge=0)
    carbs: int = Field(DEFAULT_CARBS_GOAL, ge=0)
    fat: int = Field(DEFAULT_FAT_GOAL, ge=0)


class MacroTotals(BaseModel):
    """Summed nutrition values."""

    model_config = ConfigDict(frozen=True)

    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0


class DailySummary(BaseModel):
    """
    Nutrition totals for one day against the goals.

    ``remaining`` never goes below zero; ``progress`` is total/goal
    (0.0 when the goal is 0).
    """

    model_config = ConfigDict(frozen=True)

    day: date
    entry_count: int = Field(0, ge=0)
    totals: MacroTotals
    goals: MacroGoals
    remaining: MacroTotals
    progress: dict[str, float]
