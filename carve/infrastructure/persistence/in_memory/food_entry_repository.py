"""In-memory food entry repository.

Implements IFoodEntryRepository with a dictionary. No external dependencies.
"""

from datetime import date
from typing import Dict, List

from carve.domain.meal.entries.models import FoodEntry


class InMemoryFoodEntryRepository:
    """
    Dictionary-backed food log.

    Entries are frozen models, so they are stored as-is.
    Persistence: Data lost on process restart (in-memory only)

    Example:
        >>> repository = InMemoryFoodEntryRepository()
        >>> await repository.save(entry)
        >>> entries = await repository.list_for_day(entry.day)
    """

    def __init__(self) -> None:
        """Initialize repository with empty storage."""
        self._storage: Dict[str, FoodEntry] = {}

    async def save(self, entry: FoodEntry) -> None:
        """Save or replace an entry by id."""
        self._storage[entry.id] = entry

    async def list_for_day(self, day: date) -> List[FoodEntry]:
        """Entries of a UTC day, oldest first."""
        entries = [e for e in self._storage.values() if e.day == day]
        return sorted(entries, key=lambda e: e.timestamp)
