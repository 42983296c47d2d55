"""Ingredient resolution: store first, then remote lookup."""

import logging
from dataclasses import dataclass, replace

from macro_util.domain.nutrition import Ingredient
from macro_util.domain.results import (
    Candidates,
    Invalid,
    NotFound,
    Resolved,
    RetrySearch,
)
from macro_util.services.ingredients import IngredientRepository
from macro_util.services.lookup import NutritionLookupService

_logger = logging.getLogger(__name__)


@dataclass
class IngredientResolutionService:
    """Resolves ingredient names to nutrition facts."""

    repository: IngredientRepository
    lookup: NutritionLookupService

    async def resolve(self, name: str) -> Resolved | Candidates | NotFound:
        """Resolve a name from the store or the lookup.

        Several lookup matches are returned as Candidates for the caller to
        pick from with `choose`.
        """
        stored = self.repository.get_ingredient(name)
        if stored is not None:
            return Resolved(stored)

        candidates = await self.lookup.search_candidates(name)
        _logger.info("Lookup candidates: query=%s count=%s", name, len(candidates))
        if not candidates:
            return NotFound(name)
        if len(candidates) == 1:
            return Resolved(await self._enrich(candidates[0]))
        return Candidates(query=name, options=candidates)

    async def choose(
        self, candidates: Candidates, choice: int | None
    ) -> Resolved | RetrySearch | Invalid:
        """Apply a 1-based choice; None or len+1 means none of these."""
        count = len(candidates.options)
        if choice is None or choice == count + 1:
            return RetrySearch(candidates.query)
        if choice < 1 or choice > count:
            return Invalid("choice", f"Select an option between 1 and {count + 1}.")
        return Resolved(await self._enrich(candidates.options[choice - 1]))

    def save(self, ingredient: Ingredient) -> Ingredient:
        """Persist a resolved ingredient; duplicates return the stored record."""
        if ingredient.is_stored:
            return ingredient
        return self.repository.save_ingredient(ingredient)

    async def _enrich(self, candidate: Ingredient) -> Ingredient:
        """Replace summary-only data with a detailed lookup, keeping the name."""
        if not candidate.is_incomplete:
            return candidate
        detailed = await self.lookup.search_detailed(candidate.name)
        if detailed is None:
            return candidate
        return replace(detailed, name=candidate.name)
