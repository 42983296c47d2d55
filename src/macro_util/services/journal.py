"""Daily food journal service."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from macro_util.domain.journal import FoodJournal, JournalEntry
from macro_util.domain.nutrition import DayNutrition, Ingredient, Recipe
from macro_util.domain.results import Invalid
from macro_util.services.calculator import (
    day_nutrition,
    ingredient_entry,
    recipe_entry,
)

_logger = logging.getLogger(__name__)


class JournalRepository(Protocol):
    """Persistence interface for per-date journals."""

    def get_journal(self, day: date) -> FoodJournal | None:
        """Return the journal for a date with its entries in order."""

    def ensure_journal(self, day: date) -> UUID:
        """Return the journal id for a date, creating it when absent."""

    def create_entry(
        self, journal_id: UUID, entry: JournalEntry, position: int
    ) -> None:
        """Append an entry to a journal."""

    def delete_journal(self, day: date) -> bool:
        """Delete a journal and its entries, returning whether it existed."""


@dataclass(frozen=True)
class DaySummary:
    """Journal entries for a date with their aggregate nutrition."""

    day: date
    entries: list[JournalEntry]
    nutrition: DayNutrition


@dataclass
class JournalService:
    """Records consumption snapshots and aggregates them per day."""

    repository: JournalRepository

    def add_entry(self, day: date, entry: JournalEntry) -> JournalEntry:
        """Append an entry to the date's journal."""
        journal = self.repository.get_journal(day)
        if journal is None:
            journal_id = self.repository.ensure_journal(day)
            position = 0
        else:
            journal_id = journal.id
            position = len(journal.entries)
        self.repository.create_entry(journal_id, entry, position)
        _logger.info(
            "Journal entry added: day=%s name=%s calories=%.1f",
            day.isoformat(),
            entry.name,
            entry.calories,
        )
        return entry

    def log_ingredient(
        self, day: date, ingredient: Ingredient, servings: float
    ) -> JournalEntry:
        """Journal servings of an ingredient."""
        return self.add_entry(day, ingredient_entry(ingredient, servings))

    def log_recipe(self, day: date, recipe: Recipe, servings: float) -> JournalEntry:
        """Journal servings of a recipe, scaled from its per-serving values."""
        return self.add_entry(day, recipe_entry(recipe, servings))

    def get_journal(self, day: date) -> FoodJournal | None:
        """Return the journal for a date, if any."""
        return self.repository.get_journal(day)

    def summarize(self, day: date) -> DaySummary:
        """Return entries and total nutrition for a date."""
        journal = self.repository.get_journal(day)
        entries = journal.entries if journal else []
        return DaySummary(day=day, entries=entries, nutrition=day_nutrition(entries))

    def reset_journal(self, day: date) -> bool:
        """Remove every entry for a date along with the journal itself."""
        existed = self.repository.delete_journal(day)
        if existed:
            _logger.info("Journal reset: day=%s", day.isoformat())
        return existed


def parse_journal_date(raw: str | None, today: date | None = None) -> date | Invalid:
    """Parse "today", "yesterday" or an ISO YYYY-MM-DD date."""
    current = today or date.today()
    if raw is None:
        return current
    value = raw.strip().lower()
    if value in {"", "today"}:
        return current
    if value == "yesterday":
        return current - timedelta(days=1)
    try:
        return date.fromisoformat(value)
    except ValueError:
        return Invalid(
            "date",
            "Invalid date format. Use 'today', 'yesterday', or YYYY-MM-DD.",
        )
