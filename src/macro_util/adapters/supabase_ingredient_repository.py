"""Supabase implementation for ingredients."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_util.domain.nutrition import Ingredient, Stored
from macro_util.services.ingredients import IngredientRepository


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    """Supabase-backed repository for ingredients."""

    client: Client

    def get_ingredient(self, name: str) -> Ingredient | None:
        """Return the ingredient with this name, ignoring case."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .ilike("name", escape_like(name.strip()))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ingredient(response.data[0])

    def save_ingredient(self, ingredient: Ingredient) -> Ingredient:
        """Insert an ingredient unless one with the same name exists."""
        existing = self.get_ingredient(ingredient.name)
        if existing is not None:
            return existing
        response = (
            self.client.table("ingredients")
            .insert(
                {
                    "name": ingredient.name,
                    "serving_size": ingredient.serving_size,
                    "serving_unit": ingredient.serving_unit,
                    "serving_weight_grams": ingredient.serving_weight_grams,
                    "calories": ingredient.calories,
                    "protein_g": ingredient.protein_g,
                    "fat_g": ingredient.fat_g,
                    "carbs_g": ingredient.carbs_g,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create ingredient")
        return parse_ingredient(response.data[0])


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ilike performs a case-insensitive equality."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def parse_ingredient(row: dict[str, object]) -> Ingredient:
    """Parse an ingredient row into a domain model."""
    weight = row.get("serving_weight_grams")
    return Ingredient(
        name=str(row.get("name", "")),
        serving_size=float(row.get("serving_size", 1.0)),
        serving_unit=str(row.get("serving_unit", "serving")),
        serving_weight_grams=float(weight) if weight is not None else None,
        calories=float(row.get("calories", 0.0)),
        protein_g=float(row.get("protein_g", 0.0)),
        fat_g=float(row.get("fat_g", 0.0)),
        carbs_g=float(row.get("carbs_g", 0.0)),
        identity=Stored(UUID(str(row["id"]))),
    )
