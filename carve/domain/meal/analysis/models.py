"""
Domain models for food analysis.

Input and output of a single nutrition analysis call.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_AMOUNT_GRAMS = 100


class AnalysisRequest(BaseModel):
    """
    Food description submitted for analysis.

    Built per user action (manual entry or photo) and consumed once.

    Attributes:
        name: Free-text food name, may be empty when an image is attached
        description: Optional free text
        amount_grams: Portion size in grams
        image: Raw photo bytes before compression

    Example:
        >>> request = AnalysisRequest(name="banana", amount_grams=120)
        >>> assert request.has_content()
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field("", description="Food name")
    description: str = Field("", description="Optional notes")
    amount_grams: int = Field(DEFAULT_AMOUNT_GRAMS, gt=0, description="Portion in grams")
    image: Optional[bytes] = Field(None, description="Raw photo bytes")

    def has_content(self) -> bool:
        """True when there is something to analyze."""
        return bool(self.name.strip()) or self.image is not None

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @classmethod
    def from_form(
        cls,
        name: str = "",
        amount: Any = None,
        image: Optional[bytes] = None,
        description: str = "",
    ) -> AnalysisRequest:
        """
        Build a request from raw form input.

        Amount arrives as user-typed text; anything that is not a
        positive integer falls back to 100g.

        Example:
            >>> AnalysisRequest.from_form("rice", "abc").amount_grams
            100
        """
        try:
            amount_grams = int(str(amount).strip())
        except (TypeError, ValueError):
            amount_grams = DEFAULT_AMOUNT_GRAMS
        if amount_grams <= 0:
            amount_grams = DEFAULT_AMOUNT_GRAMS
        return cls(
            name=name,
            description=description,
            amount_grams=amount_grams,
            image=image,
        )


class AnalysisResult(BaseModel):
    """
    Nutrition estimate returned by the remote model.

    Attributes:
        calories: Energy (kcal)
        protein: Protein (g)
        carbs: Carbohydrates (g)
        fat: Fat (g)
        details: Short (2-4 word) description of the identified food

    Example:
        >>> result = AnalysisResult(
        ...     calories=450, protein=30, carbs=40, fat=15,
        ...     details="grilled chicken salad",
        ... )
        >>> assert result.protein == 30
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    calories: int = Field(..., ge=0, strict=True, description="Energy (kcal)")
    protein: int = Field(..., ge=0, strict=True, description="Protein (g)")
    carbs: int = Field(..., ge=0, strict=True, description="Carbohydrates (g)")
    fat: int = Field(..., ge=0, strict=True, description="Fat (g)")
    details: str = Field(..., description="Short food description")

    @field_validator("details")
    @classmethod
    def strip_details(cls, v: str) -> str:
        """Trim surrounding whitespace."""
        return v.strip()


class AnalysisOutcome(BaseModel):
    """
    Result plus the payload that produced it.

    Attributes:
        result: Parsed nutrition estimate
        image_base64: Optimized JPEG actually sent (None for text requests)
        attempts: Number of HTTP attempts made
    """

    model_config = ConfigDict(frozen=True)

    result: AnalysisResult
    image_base64: Optional[str] = None
    attempts: int = Field(1, ge=1)
