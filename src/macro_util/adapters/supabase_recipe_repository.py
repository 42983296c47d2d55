"""Supabase implementation for recipes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_util.adapters.supabase_ingredient_repository import (
    escape_like,
    parse_ingredient,
)
from macro_util.domain.nutrition import Recipe, RecipeIngredient, Stored
from macro_util.services.recipes import RecipeRepository

_LINE_COLUMNS = "recipe_id, position, servings, weight_grams, ingredients(*)"


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository for recipes and their ingredient lines."""

    client: Client

    def get_recipe(self, name: str) -> Recipe | None:
        """Return the recipe with this name, ignoring case."""
        response = (
            self.client.table("recipes")
            .select("*")
            .ilike("name", escape_like(name.strip()))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return _parse_recipe(row, self._list_lines([str(row["id"])]))

    def save_recipe(self, recipe: Recipe) -> Recipe:
        """Insert a recipe row and its ingredient lines."""
        response = (
            self.client.table("recipes")
            .insert({"name": recipe.name, "servings": recipe.servings})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        recipe_id = str(response.data[0]["id"])
        payload = []
        for position, line in enumerate(recipe.ingredients):
            identity = line.ingredient.identity
            if not isinstance(identity, Stored):
                raise RuntimeError(
                    f"Ingredient '{line.ingredient.name}' must be stored first"
                )
            payload.append(
                {
                    "recipe_id": recipe_id,
                    "ingredient_id": str(identity.id),
                    "position": position,
                    "servings": line.servings,
                    "weight_grams": line.weight_grams,
                }
            )
        if payload:
            self.client.table("recipe_ingredients").insert(payload).execute()
        return Recipe(
            name=recipe.name,
            ingredients=recipe.ingredients,
            servings=recipe.servings,
            identity=Stored(UUID(recipe_id)),
        )

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes ordered by name."""
        response = self.client.table("recipes").select("*").order("name").execute()
        rows = response.data or []
        if not rows:
            return []
        lines = self._list_lines([str(row["id"]) for row in rows])
        return [_parse_recipe(row, lines) for row in rows]

    def rename_recipe(self, old_name: str, new_name: str) -> bool:
        """Rename a recipe."""
        response = (
            self.client.table("recipes")
            .update({"name": new_name})
            .ilike("name", escape_like(old_name.strip()))
            .execute()
        )
        return bool(response.data)

    def delete_recipe(self, name: str) -> bool:
        """Delete a recipe and its ingredient lines."""
        recipe = self.get_recipe(name)
        if recipe is None or not isinstance(recipe.identity, Stored):
            return False
        recipe_id = str(recipe.identity.id)
        self.client.table("recipe_ingredients").delete().eq(
            "recipe_id", recipe_id
        ).execute()
        self.client.table("recipes").delete().eq("id", recipe_id).execute()
        return True

    def _list_lines(self, recipe_ids: list[str]) -> dict[str, list[RecipeIngredient]]:
        response = (
            self.client.table("recipe_ingredients")
            .select(_LINE_COLUMNS)
            .in_("recipe_id", recipe_ids)
            .order("position")
            .execute()
        )
        lines: dict[str, list[RecipeIngredient]] = {}
        for row in response.data or []:
            weight = row.get("weight_grams")
            lines.setdefault(str(row["recipe_id"]), []).append(
                RecipeIngredient(
                    ingredient=parse_ingredient(row["ingredients"]),
                    servings=float(row.get("servings", 1.0)),
                    weight_grams=float(weight) if weight is not None else None,
                )
            )
        return lines


def _parse_recipe(
    row: dict[str, object], lines: dict[str, list[RecipeIngredient]]
) -> Recipe:
    """Parse a recipe row into a domain model."""
    recipe_id = str(row["id"])
    return Recipe(
        name=str(row.get("name", "")),
        ingredients=lines.get(recipe_id, []),
        servings=float(row.get("servings") or 1.0),
        identity=Stored(UUID(recipe_id)),
    )
