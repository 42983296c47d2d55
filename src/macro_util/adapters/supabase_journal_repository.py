"""Supabase implementation for food journals."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from macro_util.domain.journal import EntryType, FoodJournal, JournalEntry
from macro_util.services.journal import JournalRepository


@dataclass
class SupabaseJournalRepository(JournalRepository):
    """Supabase-backed repository for per-date journals."""

    client: Client

    def get_journal(self, day: date) -> FoodJournal | None:
        """Return the journal for a date with ordered entries."""
        journal_id = self._find_journal_id(day)
        if journal_id is None:
            return None
        response = (
            self.client.table("journal_entries")
            .select("*")
            .eq("journal_id", str(journal_id))
            .order("position")
            .execute()
        )
        entries = [_parse_entry(row) for row in response.data or []]
        return FoodJournal(id=journal_id, day=day, entries=entries)

    def ensure_journal(self, day: date) -> UUID:
        """Return the journal id for a date, inserting one if needed."""
        existing = self._find_journal_id(day)
        if existing is not None:
            return existing
        response = (
            self.client.table("food_journals")
            .insert({"day": day.isoformat()})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food journal")
        return UUID(str(response.data[0]["id"]))

    def create_entry(
        self, journal_id: UUID, entry: JournalEntry, position: int
    ) -> None:
        """Insert a journal entry row."""
        response = (
            self.client.table("journal_entries")
            .insert(
                {
                    "journal_id": str(journal_id),
                    "position": position,
                    "entry_type": entry.type.value,
                    "name": entry.name,
                    "servings": entry.servings,
                    "calories": entry.calories,
                    "protein_g": entry.protein_g,
                    "fat_g": entry.fat_g,
                    "carbs_g": entry.carbs_g,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create journal entry")

    def delete_journal(self, day: date) -> bool:
        """Delete the journal for a date and all of its entries."""
        journal_id = self._find_journal_id(day)
        if journal_id is None:
            return False
        self.client.table("journal_entries").delete().eq(
            "journal_id", str(journal_id)
        ).execute()
        self.client.table("food_journals").delete().eq(
            "id", str(journal_id)
        ).execute()
        return True

    def _find_journal_id(self, day: date) -> UUID | None:
        response = (
            self.client.table("food_journals")
            .select("id")
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return UUID(str(response.data[0]["id"]))


def _parse_entry(row: dict[str, object]) -> JournalEntry:
    """Parse a journal entry row into a domain model."""
    return JournalEntry(
        type=EntryType(str(row.get("entry_type", EntryType.INGREDIENT))),
        name=str(row.get("name", "")),
        servings=float(row.get("servings", 0.0)),
        calories=float(row.get("calories", 0.0)),
        protein_g=float(row.get("protein_g", 0.0)),
        fat_g=float(row.get("fat_g", 0.0)),
        carbs_g=float(row.get("carbs_g", 0.0)),
    )
