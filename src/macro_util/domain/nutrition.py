"""Nutrition domain models."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class Unsaved:
    """Marks a record that has not been assigned a store identity."""


@dataclass(frozen=True)
class Stored:
    """Marks a record persisted in the store under an id."""

    id: UUID


UNSAVED = Unsaved()

StoreIdentity = Unsaved | Stored


@dataclass(frozen=True)
class Ingredient:
    """Nutrition facts for one declared serving of a food."""

    name: str
    serving_size: float
    serving_unit: str
    serving_weight_grams: float | None
    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float
    identity: StoreIdentity = UNSAVED

    @property
    def is_stored(self) -> bool:
        """Return whether the ingredient has a store identity."""
        return isinstance(self.identity, Stored)

    @property
    def is_incomplete(self) -> bool:
        """Return whether only summary data (no macros) is known."""
        return self.protein_g == 0 and self.fat_g == 0 and self.carbs_g == 0


@dataclass(frozen=True)
class RecipeIngredient:
    """One ingredient line of a recipe."""

    ingredient: Ingredient
    servings: float
    weight_grams: float | None = None


@dataclass(frozen=True)
class Recipe:
    """A named composition of ingredient lines with a serving yield."""

    name: str
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    servings: float = 1.0
    identity: StoreIdentity = UNSAVED


@dataclass(frozen=True)
class NutritionSummary:
    """Absolute totals plus the share of calories from each macro."""

    total_calories: float
    total_protein_g: float
    total_fat_g: float
    total_carbs_g: float
    protein_pct: float
    fat_pct: float
    carbs_pct: float


RecipeNutrition = NutritionSummary
DayNutrition = NutritionSummary
