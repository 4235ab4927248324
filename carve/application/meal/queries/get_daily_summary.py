"""Get daily summary query - nutrition totals against daily goals."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

import structlog

from carve.domain.meal.analysis.ports import IFoodEntryRepository
from carve.domain.meal.entries.models import (
    DailySummary,
    FoodEntry,
    MacroGoals,
    MacroTotals,
)

logger = structlog.get_logger(__name__)

_MACROS = ("calories", "protein", "carbs", "fat")


@dataclass(frozen=True)
class GetDailySummaryQuery:
    """
    Query: Get daily nutrition summary.

    Attributes:
        day: UTC day to summarize
        goals: Daily targets (defaults to MacroGoals())
    """

    day: date
    goals: Optional[MacroGoals] = None


def _sum_entries(entries: List[FoodEntry]) -> MacroTotals:
    return MacroTotals(**{m: sum(getattr(e, m) for e in entries) for m in _MACROS})


def _progress(totals: MacroTotals, goals: MacroGoals) -> Dict[str, float]:
    ratios: Dict[str, float] = {}
    for m in _MACROS:
        goal = getattr(goals, m)
        ratios[m] = round(getattr(totals, m) / goal, 3) if goal > 0 else 0.0
    return ratios


class GetDailySummaryQueryHandler:
    """Handler for GetDailySummaryQuery."""

    def __init__(self, repository: IFoodEntryRepository):
        """
        Initialize handler.

        Args:
            repository: Food entry repository port
        """
        self._repository = repository

    async def handle(self, query: GetDailySummaryQuery) -> DailySummary:
        """
        Aggregate the day's entries.

        Example:
            >>> handler = GetDailySummaryQueryHandler(repository)
            >>> summary = await handler.handle(GetDailySummaryQuery(day=date.today()))
            >>> summary.remaining.calories
            2000
        """
        goals = query.goals or MacroGoals()
        entries = await self._repository.list_for_day(query.day)
        totals = _sum_entries(entries)
        remaining = MacroTotals(
            **{m: max(0, getattr(goals, m) - getattr(totals, m)) for m in _MACROS}
        )

        logger.debug(
            "Daily summary computed",
            day=query.day.isoformat(),
            entry_count=len(entries),
            calories=totals.calories,
        )
        return DailySummary(
            day=query.day,
            entry_count=len(entries),
            totals=totals,
            goals=goals,
            remaining=remaining,
            progress=_progress(totals, goals),
        )
