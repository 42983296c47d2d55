"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date
from uuid import UUID, uuid4

import httpx
import pytest

from macro_util.adapters.nutritionix_client import NutritionixClient
from macro_util.config import Settings
from macro_util.containers import AppContainer
from macro_util.domain.journal import FoodJournal, JournalEntry
from macro_util.domain.nutrition import Ingredient, Recipe, Stored
from macro_util.services.ingredients import IngredientRepository, IngredientService
from macro_util.services.journal import JournalRepository, JournalService
from macro_util.services.lookup import NutritionLookupService
from macro_util.services.recipes import RecipeRepository, RecipeService
from macro_util.services.resolution import IngredientResolutionService


def make_ingredient(  # noqa: PLR0913
    name: str = "Banana",
    calories: float = 105,
    protein_g: float = 1.3,
    fat_g: float = 0.4,
    carbs_g: float = 27,
    serving_weight_grams: float | None = 118,
    serving_size: float = 1,
    serving_unit: str = "medium",
) -> Ingredient:
    return Ingredient(
        name=name,
        serving_size=serving_size,
        serving_unit=serving_unit,
        serving_weight_grams=serving_weight_grams,
        calories=calories,
        protein_g=protein_g,
        fat_g=fat_g,
        carbs_g=carbs_g,
    )


@dataclass
class InMemoryIngredientRepository(IngredientRepository):
    """In-memory ingredient repository for tests."""

    ingredients: dict[str, Ingredient] = field(default_factory=dict)

    def get_ingredient(self, name: str) -> Ingredient | None:
        return self.ingredients.get(name.strip().lower())

    def save_ingredient(self, ingredient: Ingredient) -> Ingredient:
        existing = self.get_ingredient(ingredient.name)
        if existing is not None:
            return existing
        stored = replace(ingredient, identity=Stored(uuid4()))
        self.ingredients[ingredient.name.strip().lower()] = stored
        return stored


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[str, Recipe] = field(default_factory=dict)

    def get_recipe(self, name: str) -> Recipe | None:
        return self.recipes.get(name.strip().lower())

    def save_recipe(self, recipe: Recipe) -> Recipe:
        stored = replace(recipe, identity=Stored(uuid4()))
        self.recipes[recipe.name.lower()] = stored
        return stored

    def list_recipes(self) -> list[Recipe]:
        return sorted(self.recipes.values(), key=lambda recipe: recipe.name)

    def rename_recipe(self, old_name: str, new_name: str) -> bool:
        recipe = self.recipes.pop(old_name.lower(), None)
        if recipe is None:
            return False
        self.recipes[new_name.lower()] = replace(recipe, name=new_name)
        return True

    def delete_recipe(self, name: str) -> bool:
        return self.recipes.pop(name.lower(), None) is not None


@dataclass
class InMemoryJournalRepository(JournalRepository):
    """In-memory journal repository for tests."""

    journals: dict[date, UUID] = field(default_factory=dict)
    entries: dict[UUID, list[tuple[int, JournalEntry]]] = field(default_factory=dict)

    def get_journal(self, day: date) -> FoodJournal | None:
        journal_id = self.journals.get(day)
        if journal_id is None:
            return None
        ordered = sorted(self.entries.get(journal_id, []), key=lambda row: row[0])
        return FoodJournal(
            id=journal_id, day=day, entries=[entry for _, entry in ordered]
        )

    def ensure_journal(self, day: date) -> UUID:
        if day not in self.journals:
            self.journals[day] = uuid4()
        return self.journals[day]

    def create_entry(
        self, journal_id: UUID, entry: JournalEntry, position: int
    ) -> None:
        self.entries.setdefault(journal_id, []).append((position, entry))

    def delete_journal(self, day: date) -> bool:
        journal_id = self.journals.pop(day, None)
        if journal_id is None:
            return False
        self.entries.pop(journal_id, None)
        return True


@dataclass
class FakeNutritionixClient(NutritionixClient):
    """Fake Nutritionix client with in-memory responses."""

    instant_payload: dict[str, object] = field(
        default_factory=lambda: {"branded": [], "common": []}
    )
    nutrients_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "food_name": "banana",
                    "serving_qty": 1,
                    "serving_unit": "medium",
                    "serving_weight_grams": 118,
                    "nf_calories": 105,
                    "nf_protein": 1.3,
                    "nf_total_fat": 0.4,
                    "nf_total_carbohydrate": 27,
                }
            ]
        }
    )
    fail: bool = False
    instant_queries: list[str] = field(default_factory=list)
    nutrient_queries: list[str] = field(default_factory=list)

    async def search_instant(self, query: str) -> dict[str, object]:
        self.instant_queries.append(query)
        if self.fail:
            raise httpx.ConnectError("lookup unavailable")
        return self.instant_payload

    async def natural_nutrients(self, query: str) -> dict[str, object]:
        self.nutrient_queries.append(query)
        if self.fail:
            raise httpx.ConnectError("lookup unavailable")
        return self.nutrients_payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        nutritionix_app_id="app-id",
        nutritionix_app_key="app-key",
        tool_token="tool-token",
    )


@pytest.fixture
def nutritionix_client() -> FakeNutritionixClient:
    return FakeNutritionixClient()


@pytest.fixture
def ingredient_repository() -> InMemoryIngredientRepository:
    return InMemoryIngredientRepository()


@pytest.fixture
def container(
    settings: Settings,
    nutritionix_client: FakeNutritionixClient,
    ingredient_repository: InMemoryIngredientRepository,
) -> AppContainer:
    lookup_service = NutritionLookupService(client=nutritionix_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        lookup_service=lookup_service,
        resolution_service=IngredientResolutionService(
            repository=ingredient_repository, lookup=lookup_service
        ),
        ingredient_service=IngredientService(ingredient_repository),
        recipe_service=RecipeService(
            repository=InMemoryRecipeRepository(),
            ingredient_repository=ingredient_repository,
        ),
        journal_service=JournalService(InMemoryJournalRepository()),
        close_resources=close_resources,
    )
