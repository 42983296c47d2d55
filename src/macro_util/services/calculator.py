"""Nutrition totals, macro percentages and journal snapshots."""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from macro_util.domain.journal import EntryType, FoodJournal, JournalEntry
from macro_util.domain.nutrition import (
    UNSAVED,
    Ingredient,
    NutritionSummary,
    Recipe,
    RecipeIngredient,
)
from macro_util.domain.results import Invalid

CALORIES_PER_GRAM_PROTEIN = 4.0
CALORIES_PER_GRAM_CARBS = 4.0
CALORIES_PER_GRAM_FAT = 9.0


def line_multiplier(line: RecipeIngredient) -> float:
    """Return how many servings of the ingredient a recipe line contributes.

    An explicit line weight wins over the stored servings count whenever the
    ingredient knows its serving weight.
    """
    weight = line.ingredient.serving_weight_grams
    if line.weight_grams is not None and weight:
        return line.weight_grams / weight
    return line.servings


def recipe_nutrition(recipe: Recipe) -> NutritionSummary:
    """Compute total nutrition for all ingredient lines of a recipe."""
    calories = protein = fat = carbs = 0.0
    for line in recipe.ingredients:
        ingredient = line.ingredient
        multiplier = line_multiplier(line)
        calories += ingredient.calories * multiplier
        protein += ingredient.protein_g * multiplier
        fat += ingredient.fat_g * multiplier
        carbs += ingredient.carbs_g * multiplier
    return _summarize(calories, protein, fat, carbs)


def recipe_nutrition_per_serving(recipe: Recipe) -> NutritionSummary:
    """Compute nutrition for one serving of the recipe's yield."""
    total = recipe_nutrition(recipe)
    if recipe.servings <= 0:
        return total
    return replace(
        total,
        total_calories=total.total_calories / recipe.servings,
        total_protein_g=total.total_protein_g / recipe.servings,
        total_fat_g=total.total_fat_g / recipe.servings,
        total_carbs_g=total.total_carbs_g / recipe.servings,
    )


def day_nutrition(journal: FoodJournal | Iterable[JournalEntry]) -> NutritionSummary:
    """Sum the absolute values of journal entries."""
    entries = journal.entries if isinstance(journal, FoodJournal) else journal
    calories = protein = fat = carbs = 0.0
    for entry in entries:
        calories += entry.calories
        protein += entry.protein_g
        fat += entry.fat_g
        carbs += entry.carbs_g
    return _summarize(calories, protein, fat, carbs)


def ingredient_entry(ingredient: Ingredient, servings: float) -> JournalEntry:
    """Snapshot the nutrition of eating a number of ingredient servings."""
    return JournalEntry(
        type=EntryType.INGREDIENT,
        name=ingredient.name,
        servings=servings,
        calories=ingredient.calories * servings,
        protein_g=ingredient.protein_g * servings,
        fat_g=ingredient.fat_g * servings,
        carbs_g=ingredient.carbs_g * servings,
    )


def recipe_entry(recipe: Recipe, servings: float) -> JournalEntry:
    """Snapshot the nutrition of eating a number of recipe servings."""
    per_serving = recipe_nutrition_per_serving(recipe)
    return JournalEntry(
        type=EntryType.RECIPE,
        name=recipe.name,
        servings=servings,
        calories=per_serving.total_calories * servings,
        protein_g=per_serving.total_protein_g * servings,
        fat_g=per_serving.total_fat_g * servings,
        carbs_g=per_serving.total_carbs_g * servings,
    )


def calories_from_macros(protein_g: float, fat_g: float, carbs_g: float) -> float:
    """Return calories implied by macro grams using Atwater factors."""
    return (
        protein_g * CALORIES_PER_GRAM_PROTEIN
        + fat_g * CALORIES_PER_GRAM_FAT
        + carbs_g * CALORIES_PER_GRAM_CARBS
    )


@dataclass(frozen=True)
class IngredientChanges:
    """Edits to apply to an existing ingredient; None leaves a field as is."""

    name: str | None = None
    serving_size: float | None = None
    serving_unit: str | None = None
    serving_weight_grams: float | None = None
    clear_serving_weight: bool = False
    protein_g: float | None = None
    fat_g: float | None = None
    carbs_g: float | None = None

    @property
    def changes_macros(self) -> bool:
        """Return whether any macro field is edited."""
        return any(
            value is not None for value in (self.protein_g, self.fat_g, self.carbs_g)
        )

    @property
    def changes_weight(self) -> bool:
        """Return whether the serving weight is edited."""
        return self.clear_serving_weight or self.serving_weight_grams is not None


def customize_ingredient(
    base: Ingredient, changes: IngredientChanges
) -> Ingredient | Invalid:
    """Build a new unsaved version of an ingredient with edits applied.

    Macro edits recompute calories from Atwater factors. Otherwise a new
    serving weight rescales calories by the weight ratio.
    """
    invalid = _validate_changes(changes)
    if invalid is not None:
        return invalid

    weight = base.serving_weight_grams
    if changes.clear_serving_weight:
        weight = None
    elif changes.serving_weight_grams is not None:
        weight = changes.serving_weight_grams

    updated = replace(
        base,
        name=(changes.name or "").strip() or base.name,
        serving_size=changes.serving_size or base.serving_size,
        serving_unit=(changes.serving_unit or "").strip() or base.serving_unit,
        serving_weight_grams=weight,
        protein_g=_pick(changes.protein_g, base.protein_g),
        fat_g=_pick(changes.fat_g, base.fat_g),
        carbs_g=_pick(changes.carbs_g, base.carbs_g),
        identity=UNSAVED,
    )

    if changes.changes_macros:
        return replace(
            updated,
            calories=calories_from_macros(
                updated.protein_g, updated.fat_g, updated.carbs_g
            ),
        )
    if (
        changes.changes_weight
        and base.serving_weight_grams
        and updated.serving_weight_grams is not None
    ):
        ratio = updated.serving_weight_grams / base.serving_weight_grams
        return replace(updated, calories=base.calories * ratio)
    return updated


def _validate_changes(changes: IngredientChanges) -> Invalid | None:
    if changes.serving_size is not None and changes.serving_size <= 0:
        return Invalid("serving_size", "Serving size must be a positive number.")
    if changes.serving_weight_grams is not None and changes.serving_weight_grams <= 0:
        return Invalid("serving_weight_grams", "Serving weight must be positive.")
    for field_name in ("protein_g", "fat_g", "carbs_g"):
        value = getattr(changes, field_name)
        if value is not None and value < 0:
            return Invalid(field_name, f"{field_name} must be non-negative.")
    return None


def _pick(value: float | None, fallback: float) -> float:
    return fallback if value is None else value


def _summarize(
    calories: float, protein: float, fat: float, carbs: float
) -> NutritionSummary:
    if calories == 0:
        protein_pct = fat_pct = carbs_pct = 0.0
    else:
        protein_pct = protein * CALORIES_PER_GRAM_PROTEIN / calories * 100
        fat_pct = fat * CALORIES_PER_GRAM_FAT / calories * 100
        carbs_pct = carbs * CALORIES_PER_GRAM_CARBS / calories * 100
    return NutritionSummary(
        total_calories=calories,
        total_protein_g=protein,
        total_fat_g=fat,
        total_carbs_g=carbs,
        protein_pct=protein_pct,
        fat_pct=fat_pct,
        carbs_pct=carbs_pct,
    )
