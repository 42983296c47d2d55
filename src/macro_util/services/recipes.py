"""Services for creating and managing recipes."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from macro_util.domain.nutrition import Recipe, RecipeIngredient
from macro_util.domain.results import AlreadyExists, Invalid, NotFound
from macro_util.services.ingredients import IngredientRepository

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def get_recipe(self, name: str) -> Recipe | None:
        """Return the recipe with this name, ignoring case."""

    def save_recipe(self, recipe: Recipe) -> Recipe:
        """Store a recipe with its ingredient lines and return it."""

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes ordered by name."""

    def rename_recipe(self, old_name: str, new_name: str) -> bool:
        """Rename a recipe, returning whether a row changed."""

    def delete_recipe(self, name: str) -> bool:
        """Delete a recipe and its lines, returning whether it existed."""


@dataclass
class RecipeService:
    """Application service for recipe operations."""

    repository: RecipeRepository
    ingredient_repository: IngredientRepository

    def create(
        self, name: str, lines: list[RecipeIngredient], servings: float = 1.0
    ) -> Recipe | Invalid | AlreadyExists:
        """Create a recipe from ingredient lines.

        Lines that reference unsaved ingredients get them stored first so the
        recipe can refer to them.
        """
        name = name.strip()
        if not name:
            return Invalid("name", "Recipe name cannot be empty.")
        if servings <= 0:
            return Invalid("servings", "Recipe servings must be greater than zero.")
        if not lines:
            return Invalid("ingredients", "No ingredients added. Recipe not created.")
        for line in lines:
            if line.servings <= 0 and not line.weight_grams:
                return Invalid(
                    "ingredients",
                    f"Servings of {line.ingredient.name} must be positive.",
                )
        if self.repository.get_recipe(name) is not None:
            return AlreadyExists(name)

        stored_lines = [
            line
            if line.ingredient.is_stored
            else replace(
                line,
                ingredient=self.ingredient_repository.save_ingredient(
                    line.ingredient
                ),
            )
            for line in lines
        ]
        recipe = self.repository.save_recipe(
            Recipe(name=name, ingredients=stored_lines, servings=servings)
        )
        _logger.info(
            "Created recipe: name=%s ingredients=%s", recipe.name, len(stored_lines)
        )
        return recipe

    def get(self, name: str) -> Recipe | NotFound:
        """Return a recipe by name."""
        recipe = self.repository.get_recipe(name)
        if recipe is None:
            return NotFound(name)
        return recipe

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes."""
        return self.repository.list_recipes()

    def rename(
        self, old_name: str, new_name: str
    ) -> Recipe | NotFound | AlreadyExists:
        """Rename a recipe, refusing to overwrite another one."""
        recipe = self.repository.get_recipe(old_name)
        if recipe is None:
            return NotFound(old_name)
        existing = self.repository.get_recipe(new_name)
        if existing is not None and existing.identity != recipe.identity:
            return AlreadyExists(new_name)
        self.repository.rename_recipe(recipe.name, new_name)
        return replace(recipe, name=new_name)

    def delete(self, name: str) -> bool | NotFound:
        """Delete a recipe by name."""
        recipe = self.repository.get_recipe(name)
        if recipe is None:
            return NotFound(name)
        return self.repository.delete_recipe(recipe.name)
