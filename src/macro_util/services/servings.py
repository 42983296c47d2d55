"""Serving amount parsing for free-form user input."""

import re
from dataclasses import dataclass
from enum import StrEnum

from macro_util.domain.nutrition import Ingredient
from macro_util.domain.results import Invalid

GRAMS_PER_OUNCE = 28.3495

_WEIGHT_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(g|oz)$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


class ServingInputError(StrEnum):
    """Reasons a serving amount cannot be used."""

    NO_WEIGHT_BASIS = "no_weight_basis"
    NOT_A_NUMBER = "not_a_number"
    NON_POSITIVE = "non_positive"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class ServingCalculation:
    """Normalized servings count parsed from user input."""

    servings: float
    display_text: str
    grams: float | None = None


def parse_serving_input(
    text: str, ingredient: Ingredient
) -> ServingCalculation | Invalid:
    """Parse "2", "0.5", "150g" or "5oz" into servings of the ingredient."""
    trimmed = text.strip()
    weight_match = _WEIGHT_RE.match(trimmed)
    if weight_match:
        amount = float(weight_match.group(1))
        unit = weight_match.group(2).lower()
        grams = amount * GRAMS_PER_OUNCE if unit == "oz" else amount
        weight = ingredient.serving_weight_grams
        if weight is None or weight <= 0:
            return Invalid(
                ServingInputError.NO_WEIGHT_BASIS,
                f"{ingredient.name} has no serving weight; use a servings count.",
            )
        if grams <= 0:
            return Invalid(ServingInputError.NON_POSITIVE, "Weight must be positive.")
        servings = grams / weight
        return ServingCalculation(
            servings=servings,
            display_text=f"{servings:.1f} servings ({int(grams)}g)",
            grams=grams,
        )

    count = parse_servings_count(trimmed)
    if isinstance(count, Invalid):
        return count
    return ServingCalculation(servings=count, display_text=format_servings(count))


def parse_servings_count(text: str) -> float | Invalid:
    """Parse a plain positive decimal servings count."""
    trimmed = text.strip()
    if _NUMBER_RE.match(trimmed):
        value = float(trimmed)
        if value <= 0:
            return Invalid(
                ServingInputError.NON_POSITIVE, "Servings must be greater than zero."
            )
        return value
    if _LEADING_NUMBER_RE.match(trimmed):
        return Invalid(
            ServingInputError.UNPARSEABLE,
            f"Cannot read '{trimmed}'. Use servings (1, 0.5) or weights (150g, 5oz).",
        )
    return Invalid(ServingInputError.NOT_A_NUMBER, f"'{trimmed}' is not a number.")


def format_servings(servings: float) -> str:
    """Format a servings count, dropping the decimal for whole numbers."""
    if servings == int(servings):
        return f"{int(servings)} servings"
    return f"{servings:.1f} servings"
