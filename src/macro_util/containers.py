"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from macro_util.adapters.nutritionix_client import HttpxNutritionixClient
from macro_util.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from macro_util.adapters.supabase_journal_repository import (
    SupabaseJournalRepository,
)
from macro_util.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from macro_util.config import Settings
from macro_util.services.ingredients import IngredientService
from macro_util.services.journal import JournalService
from macro_util.services.lookup import NutritionLookupService
from macro_util.services.recipes import RecipeService
from macro_util.services.resolution import IngredientResolutionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    lookup_service: NutritionLookupService
    resolution_service: IngredientResolutionService
    ingredient_service: IngredientService
    recipe_service: RecipeService
    journal_service: JournalService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    ingredient_repository = SupabaseIngredientRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    journal_repository = SupabaseJournalRepository(supabase_client)
    nutritionix_client = HttpxNutritionixClient.create(
        app_id=resolved_settings.nutritionix_app_id,
        app_key=resolved_settings.nutritionix_app_key,
        base_url=resolved_settings.nutritionix_base_url,
    )
    lookup_service = NutritionLookupService(
        client=nutritionix_client,
        candidate_limit=resolved_settings.lookup_candidate_limit,
    )

    async def close_resources() -> None:
        await nutritionix_client.close()

    return AppContainer(
        settings=resolved_settings,
        lookup_service=lookup_service,
        resolution_service=IngredientResolutionService(
            repository=ingredient_repository, lookup=lookup_service
        ),
        ingredient_service=IngredientService(ingredient_repository),
        recipe_service=RecipeService(
            repository=recipe_repository,
            ingredient_repository=ingredient_repository,
        ),
        journal_service=JournalService(journal_repository),
        close_resources=close_resources,
    )
