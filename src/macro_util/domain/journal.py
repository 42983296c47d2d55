"""Domain models for the food journal."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from uuid import UUID


class EntryType(StrEnum):
    """Kind of food a journal entry was computed from."""

    RECIPE = "RECIPE"
    INGREDIENT = "INGREDIENT"


@dataclass(frozen=True)
class JournalEntry:
    """Snapshot of absolute nutrition for one consumption event."""

    type: EntryType
    name: str
    servings: float
    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float


@dataclass(frozen=True)
class FoodJournal:
    """All entries recorded for one calendar date, in insertion order."""

    id: UUID
    day: date
    entries: list[JournalEntry] = field(default_factory=list)
