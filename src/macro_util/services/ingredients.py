"""Services for managing stored ingredients."""

import logging
from dataclasses import dataclass
from typing import Protocol

from macro_util.domain.nutrition import Ingredient
from macro_util.domain.results import AlreadyExists, Invalid, NotFound
from macro_util.services.calculator import IngredientChanges, customize_ingredient

_logger = logging.getLogger(__name__)


class IngredientRepository(Protocol):
    """Persistence interface for ingredients."""

    def get_ingredient(self, name: str) -> Ingredient | None:
        """Return the ingredient with this name, ignoring case."""

    def save_ingredient(self, ingredient: Ingredient) -> Ingredient:
        """Store an ingredient, returning the existing record on duplicates."""


@dataclass
class IngredientService:
    """Application service for manual ingredient creation and edits."""

    repository: IngredientRepository

    def get(self, name: str) -> Ingredient | NotFound:
        """Return a stored ingredient by name."""
        ingredient = self.repository.get_ingredient(name)
        if ingredient is None:
            return NotFound(name)
        return ingredient

    def create_custom(
        self, ingredient: Ingredient
    ) -> Ingredient | Invalid | AlreadyExists:
        """Validate and store a manually entered ingredient."""
        invalid = validate_ingredient(ingredient)
        if invalid is not None:
            return invalid
        if self.repository.get_ingredient(ingredient.name) is not None:
            return AlreadyExists(ingredient.name)
        saved = self.repository.save_ingredient(ingredient)
        _logger.info("Created custom ingredient: name=%s", saved.name)
        return saved

    def customize(
        self, name: str, changes: IngredientChanges, save: bool = True
    ) -> Ingredient | Invalid | NotFound | AlreadyExists:
        """Derive a new ingredient version from a stored one.

        The stored original is left untouched so recipes and journal entries
        that already reference it keep their values.
        """
        base = self.repository.get_ingredient(name)
        if base is None:
            return NotFound(name)
        customized = customize_ingredient(base, changes)
        if isinstance(customized, Invalid) or not save:
            return customized
        if self.repository.get_ingredient(customized.name) is not None:
            return AlreadyExists(customized.name)
        return self.repository.save_ingredient(customized)


def validate_ingredient(ingredient: Ingredient) -> Invalid | None:
    """Check the invariants of per-serving nutrition data."""
    if not ingredient.name.strip():
        return Invalid("name", "Name cannot be empty.")
    if ingredient.serving_size <= 0:
        return Invalid("serving_size", "Serving size must be a positive number.")
    if not ingredient.serving_unit.strip():
        return Invalid("serving_unit", "Serving unit cannot be empty.")
    if (
        ingredient.serving_weight_grams is not None
        and ingredient.serving_weight_grams <= 0
    ):
        return Invalid("serving_weight_grams", "Serving weight must be positive.")
    for field_name in ("calories", "protein_g", "fat_g", "carbs_g"):
        if getattr(ingredient, field_name) < 0:
            return Invalid(field_name, f"{field_name} must be non-negative.")
    return None
