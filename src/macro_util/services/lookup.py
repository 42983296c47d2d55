"""Nutrition lookup service integrating Nutritionix."""

import logging
from dataclasses import dataclass

from macro_util.adapters.nutritionix_client import NutritionixClient
from macro_util.domain.nutrition import Ingredient

_logger = logging.getLogger(__name__)


@dataclass
class NutritionLookupService:
    """Best-effort remote lookup; failures degrade to empty results."""

    client: NutritionixClient
    candidate_limit: int = 5

    async def search_candidates(self, query: str) -> list[Ingredient]:
        """Return candidate ingredients, possibly without macros."""
        try:
            payload = await self.client.search_instant(query)
        except Exception as exc:
            _logger.warning("Instant search failed: query=%s error=%s", query, exc)
            payload = {}
        candidates = _instant_candidates(payload, self.candidate_limit)
        if candidates:
            return candidates

        try:
            payload = await self.client.natural_nutrients(query)
        except Exception as exc:
            _logger.warning("Nutrient search failed: query=%s error=%s", query, exc)
            return []
        return [_parse_food(food) for food in _foods(payload)]

    async def search_detailed(self, query: str) -> Ingredient | None:
        """Return the first fully detailed match for the query, if any."""
        try:
            payload = await self.client.natural_nutrients(query)
        except Exception as exc:
            _logger.warning("Detail lookup failed: query=%s error=%s", query, exc)
            return None
        foods = _foods(payload)
        if not foods:
            return None
        return _parse_food(foods[0])


def _foods(payload: dict[str, object]) -> list[dict[str, object]]:
    foods = payload.get("foods")
    return foods if isinstance(foods, list) else []


def _instant_candidates(payload: dict[str, object], limit: int) -> list[Ingredient]:
    """Build incomplete candidates, branded foods first."""
    candidates: list[Ingredient] = []
    for food in (payload.get("branded") or [])[:limit]:
        name = str(food.get("food_name", ""))
        brand = food.get("brand_name")
        display_name = f"{name} ({brand})" if brand else name
        candidates.append(_summary_candidate(display_name, food))
    for food in (payload.get("common") or [])[: limit - len(candidates)]:
        candidates.append(_summary_candidate(str(food.get("food_name", "")), food))
    return candidates


def _summary_candidate(name: str, food: dict[str, object]) -> Ingredient:
    return Ingredient(
        name=name,
        serving_size=_to_float(food.get("serving_qty"), 1.0),
        serving_unit=str(food.get("serving_unit") or "serving"),
        serving_weight_grams=None,
        calories=_to_float(food.get("nf_calories")),
        protein_g=0.0,
        fat_g=0.0,
        carbs_g=0.0,
    )


def _parse_food(food: dict[str, object]) -> Ingredient:
    """Parse a natural-nutrients food into a complete ingredient."""
    weight = food.get("serving_weight_grams")
    return Ingredient(
        name=str(food.get("food_name", "")),
        serving_size=_to_float(food.get("serving_qty"), 1.0),
        serving_unit=str(food.get("serving_unit") or "serving"),
        serving_weight_grams=(
            float(weight) if isinstance(weight, int | float) and weight > 0 else None
        ),
        calories=_to_float(food.get("nf_calories")),
        protein_g=_to_float(food.get("nf_protein")),
        fat_g=_to_float(food.get("nf_total_fat")),
        carbs_g=_to_float(food.get("nf_total_carbohydrate")),
    )


def _to_float(value: object, default: float = 0.0) -> float:
    if isinstance(value, int | float):
        return float(value)
    return default
