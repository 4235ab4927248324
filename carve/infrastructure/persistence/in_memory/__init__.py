"""In-memory repository implementations."""

from carve.infrastructure.persistence.in_memory.food_entry_repository import (
    InMemoryFoodEntryRepository,
)

__all__ = ["InMemoryFoodEntryRepository"]
