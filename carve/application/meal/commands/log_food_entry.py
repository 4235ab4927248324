"""Log food entry command and handler.

Analyze a food description/photo and persist the result:
1. FoodAnalysisClient → nutrition estimate
2. FoodEntry built from request + estimate
3. Entry saved to the repository
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog

from carve.domain.meal.analysis.models import AnalysisRequest
from carve.domain.meal.analysis.ports import IFoodAnalysisClient, IFoodEntryRepository
from carve.domain.meal.entries.models import FoodEntry

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LogFoodEntryCommand:
    """
    Command: Analyze and log a food entry.

    Attributes:
        request: What to analyze
        timestamp: Entry time (defaults to now, UTC)
    """

    request: AnalysisRequest
    timestamp: Optional[datetime] = None


class LogFoodEntryCommandHandler:
    """Handler for LogFoodEntryCommand."""

    def __init__(
        self,
        analysis_client: IFoodAnalysisClient,
        repository: IFoodEntryRepository,
    ):
        """
        Initialize handler.

        Args:
            analysis_client: Nutrition analysis port
            repository: Food entry repository port
        """
        self._analysis_client = analysis_client
        self._repository = repository

    async def handle(self, command: LogFoodEntryCommand) -> FoodEntry:
        """
        Execute command.

        Returns:
            The saved FoodEntry

        Raises:
            AnalysisError: Analysis failed; nothing is saved

        Example:
            >>> handler = LogFoodEntryCommandHandler(client, repository)
            >>> entry = await handler.handle(
            ...     LogFoodEntryCommand(request=AnalysisRequest(name="apple"))
            ... )
        """
        outcome = await self._analysis_client.analyze_detailed(command.request)

        entry = FoodEntry.from_analysis(
            command.request,
            outcome.result,
            image_base64=outcome.image_base64,
            timestamp=command.timestamp,
        )
        await self._repository.save(entry)

        logger.info(
            "Food entry logged",
            entry_id=entry.id,
            name=entry.name,
            calories=entry.calories,
            has_image=entry.image_base64 is not None,
        )
        return entry
