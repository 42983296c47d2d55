"""Argument models for tool-dispatch calls."""

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    """Body of a tool invocation."""

    arguments: dict[str, object] = Field(default_factory=dict)


class NoArguments(BaseModel):
    pass


class RecipeNameArgs(BaseModel):
    recipe_name: str


class RenameRecipeArgs(BaseModel):
    recipe_name: str
    new_name: str


class RecipeLineArgs(BaseModel):
    name: str
    amount: str | float = "1"


class CreateRecipeArgs(BaseModel):
    name: str
    servings: float = 1.0
    ingredients: list[RecipeLineArgs]


class SearchIngredientArgs(BaseModel):
    query: str


class AddIngredientArgs(BaseModel):
    food_name: str
    amount: str | float = "1"
    date: str | None = None
    choice: int | None = None
    save: bool = True


class AddRecipeArgs(BaseModel):
    recipe_name: str
    servings: str | float = "1"
    date: str | None = None


class DateArgs(BaseModel):
    date: str | None = None


class CustomIngredientArgs(BaseModel):
    name: str
    serving_size: float
    serving_unit: str
    serving_weight_grams: float | None = None
    calories: float
    protein: float
    fat: float
    carbs: float


class CustomizeIngredientArgs(BaseModel):
    name: str
    new_name: str | None = None
    serving_size: float | None = None
    serving_unit: str | None = None
    serving_weight_grams: float | None = None
    clear_serving_weight: bool = False
    protein: float | None = None
    fat: float | None = None
    carbs: float | None = None
    save: bool = True
