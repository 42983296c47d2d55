"""Tool-dispatch endpoints exposing the nutrition core."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import BaseModel, ValidationError

from macro_util.api.tool_models import (
    AddIngredientArgs,
    AddRecipeArgs,
    CreateRecipeArgs,
    CustomIngredientArgs,
    CustomizeIngredientArgs,
    DateArgs,
    NoArguments,
    RecipeNameArgs,
    RenameRecipeArgs,
    SearchIngredientArgs,
    ToolCall,
)
from macro_util.domain.journal import JournalEntry
from macro_util.domain.nutrition import (
    Ingredient,
    NutritionSummary,
    Recipe,
    RecipeIngredient,
)
from macro_util.domain.results import (
    AlreadyExists,
    Candidates,
    Invalid,
    NotFound,
    RetrySearch,
)
from macro_util.services.calculator import (
    IngredientChanges,
    line_multiplier,
    recipe_nutrition,
    recipe_nutrition_per_serving,
)
from macro_util.services.journal import parse_journal_date
from macro_util.services.servings import parse_serving_input, parse_servings_count

if TYPE_CHECKING:
    from macro_util.containers import AppContainer

_T = TypeVar("_T")

router = APIRouter(prefix="/tools", tags=["tools"])


def _get_tool_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.tool_token


async def require_tool_token(
    x_tool_token: str | None = Header(default=None),
    tool_token: str = Depends(_get_tool_token),
) -> None:
    """Ensure requests include a valid tool token."""
    if not x_tool_token or x_tool_token != tool_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@dataclass(frozen=True)
class Tool:
    """A named operation callable through the dispatch endpoint."""

    description: str
    arguments: type[BaseModel]
    handler: Callable[[AppContainer, Any], Awaitable[dict[str, object]]]


@router.get("", dependencies=[Depends(require_tool_token)])
async def list_tools() -> dict[str, object]:
    """Return the available tools and their argument schemas."""
    return {
        "tools": [
            {
                "name": name,
                "description": tool.description,
                "input_schema": tool.arguments.model_json_schema(),
            }
            for name, tool in _TOOLS.items()
        ]
    }


@router.post("/{tool_name}", dependencies=[Depends(require_tool_token)])
async def call_tool(
    tool_name: str, call: ToolCall, request: Request
) -> dict[str, object]:
    """Validate arguments and dispatch to the named tool."""
    tool = _TOOLS.get(tool_name)
    if tool is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown tool: {tool_name}",
        )
    try:
        arguments = tool.arguments.model_validate(call.arguments)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    container: AppContainer = request.app.state.container
    return await tool.handler(container, arguments)


async def _list_recipes(
    container: AppContainer, _args: NoArguments
) -> dict[str, object]:
    recipes = container.recipe_service.list_recipes()
    return {
        "recipes": [
            {
                "name": recipe.name,
                "servings": recipe.servings,
                "ingredients": len(recipe.ingredients),
                "calories": round(recipe_nutrition(recipe).total_calories, 1),
            }
            for recipe in recipes
        ]
    }


async def _show_recipe(
    container: AppContainer, args: RecipeNameArgs
) -> dict[str, object]:
    recipe = _unwrap(container.recipe_service.get(args.recipe_name))
    return _recipe_payload(recipe)


async def _create_recipe(
    container: AppContainer, args: CreateRecipeArgs
) -> dict[str, object]:
    if not isinstance(container.recipe_service.get(args.name), NotFound):
        _unwrap(AlreadyExists(args.name))

    lines: list[RecipeIngredient] = []
    skipped: list[str] = []
    for item in args.ingredients:
        ingredient = await _resolve_for_recipe(container, item.name)
        if ingredient is None:
            skipped.append(item.name)
            continue
        calculation = _unwrap(parse_serving_input(str(item.amount), ingredient))
        lines.append(
            RecipeIngredient(
                ingredient=ingredient,
                servings=calculation.servings,
                weight_grams=calculation.grams,
            )
        )

    recipe = _unwrap(
        container.recipe_service.create(args.name, lines, servings=args.servings)
    )
    return {**_recipe_payload(recipe), "skipped": skipped}


async def _rename_recipe(
    container: AppContainer, args: RenameRecipeArgs
) -> dict[str, object]:
    new_name = args.new_name.strip()
    if not new_name:
        _unwrap(Invalid("new_name", "Recipe name cannot be empty."))
    recipe = _unwrap(container.recipe_service.rename(args.recipe_name, new_name))
    return {
        "name": recipe.name,
        "message": f"Recipe '{args.recipe_name}' renamed to '{recipe.name}'",
    }


async def _delete_recipe(
    container: AppContainer, args: RecipeNameArgs
) -> dict[str, object]:
    _unwrap(container.recipe_service.delete(args.recipe_name))
    return {
        "name": args.recipe_name,
        "message": f"Recipe '{args.recipe_name}' deleted",
    }


async def _search_ingredient(
    container: AppContainer, args: SearchIngredientArgs
) -> dict[str, object]:
    candidates = await container.lookup_service.search_candidates(args.query)
    return {"results": [_ingredient_payload(item) for item in candidates]}


async def _add_ingredient_to_journal(
    container: AppContainer, args: AddIngredientArgs
) -> dict[str, object]:
    day = _unwrap(parse_journal_date(args.date))
    resolution = container.resolution_service
    outcome = await resolution.resolve(args.food_name)
    if isinstance(outcome, Candidates):
        if args.choice is None:
            return {
                "status": "choose",
                "query": outcome.query,
                "options": [_ingredient_payload(item) for item in outcome.options],
                "none_of_these": len(outcome.options) + 1,
            }
        outcome = await resolution.choose(outcome, args.choice)
    if isinstance(outcome, RetrySearch):
        return {
            "status": "retry",
            "message": f"No option chosen for '{outcome.query}'. "
            "Try a different ingredient name.",
        }
    ingredient = _unwrap(outcome).ingredient
    calculation = _unwrap(parse_serving_input(str(args.amount), ingredient))
    if args.save:
        ingredient = resolution.save(ingredient)

    entry = container.journal_service.log_ingredient(
        day, ingredient, calculation.servings
    )
    return {
        "status": "added",
        "date": day.isoformat(),
        "saved": ingredient.is_stored,
        "entry": _entry_payload(entry),
        "message": f"Added {ingredient.name} ({calculation.display_text}) "
        f"to journal for {day.isoformat()}",
    }


async def _add_recipe_to_journal(
    container: AppContainer, args: AddRecipeArgs
) -> dict[str, object]:
    day = _unwrap(parse_journal_date(args.date))
    recipe = _unwrap(container.recipe_service.get(args.recipe_name))
    servings = _unwrap(parse_servings_count(str(args.servings)))
    entry = container.journal_service.log_recipe(day, recipe, servings)
    return {
        "status": "added",
        "date": day.isoformat(),
        "entry": _entry_payload(entry),
    }


async def _get_journal_summary(
    container: AppContainer, args: DateArgs
) -> dict[str, object]:
    day = _unwrap(parse_journal_date(args.date))
    summary = container.journal_service.summarize(day)
    return {
        "date": summary.day.isoformat(),
        "entries": [_entry_payload(entry) for entry in summary.entries],
        "nutrition": _nutrition_payload(summary.nutrition),
    }


async def _reset_journal(container: AppContainer, args: DateArgs) -> dict[str, object]:
    day = _unwrap(parse_journal_date(args.date))
    if not container.journal_service.reset_journal(day):
        _unwrap(NotFound(day.isoformat()))
    return {"date": day.isoformat(), "message": f"Journal for {day} has been reset"}


async def _create_custom_ingredient(
    container: AppContainer, args: CustomIngredientArgs
) -> dict[str, object]:
    ingredient = _unwrap(
        container.ingredient_service.create_custom(
            Ingredient(
                name=args.name.strip(),
                serving_size=args.serving_size,
                serving_unit=args.serving_unit.strip(),
                serving_weight_grams=args.serving_weight_grams,
                calories=args.calories,
                protein_g=args.protein,
                fat_g=args.fat,
                carbs_g=args.carbs,
            )
        )
    )
    return {"ingredient": _ingredient_payload(ingredient)}


async def _customize_ingredient(
    container: AppContainer, args: CustomizeIngredientArgs
) -> dict[str, object]:
    changes = IngredientChanges(
        name=args.new_name,
        serving_size=args.serving_size,
        serving_unit=args.serving_unit,
        serving_weight_grams=args.serving_weight_grams,
        clear_serving_weight=args.clear_serving_weight,
        protein_g=args.protein,
        fat_g=args.fat,
        carbs_g=args.carbs,
    )
    ingredient = _unwrap(
        container.ingredient_service.customize(args.name, changes, save=args.save)
    )
    return {"ingredient": _ingredient_payload(ingredient)}


async def _resolve_for_recipe(
    container: AppContainer, name: str
) -> Ingredient | None:
    """Resolve a recipe line, taking the best match when several exist."""
    resolution = container.resolution_service
    outcome = await resolution.resolve(name)
    if isinstance(outcome, NotFound):
        return None
    if isinstance(outcome, Candidates):
        outcome = await resolution.choose(outcome, 1)
    return _unwrap(outcome).ingredient


def _unwrap(result: _T | Invalid | NotFound | AlreadyExists) -> _T:
    """Raise the HTTP error matching a tagged failure, else pass through."""
    if isinstance(result, Invalid):
        raise HTTPException(
            status_code=422,
            detail={"reason": str(result.reason), "message": result.message},
        )
    if isinstance(result, NotFound):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"'{result.name}' not found",
        )
    if isinstance(result, AlreadyExists):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"'{result.name}' already exists",
        )
    return result


def _nutrition_payload(nutrition: NutritionSummary) -> dict[str, float]:
    return {
        "calories": round(nutrition.total_calories, 1),
        "protein": round(nutrition.total_protein_g, 1),
        "fat": round(nutrition.total_fat_g, 1),
        "carbs": round(nutrition.total_carbs_g, 1),
        "protein_percentage": round(nutrition.protein_pct, 1),
        "fat_percentage": round(nutrition.fat_pct, 1),
        "carbs_percentage": round(nutrition.carbs_pct, 1),
    }


def _ingredient_payload(ingredient: Ingredient) -> dict[str, object]:
    return {
        "name": ingredient.name,
        "serving_size": ingredient.serving_size,
        "serving_unit": ingredient.serving_unit,
        "serving_weight_grams": ingredient.serving_weight_grams,
        "calories": round(ingredient.calories, 1),
        "protein": round(ingredient.protein_g, 1),
        "fat": round(ingredient.fat_g, 1),
        "carbs": round(ingredient.carbs_g, 1),
        "saved": ingredient.is_stored,
    }


def _entry_payload(entry: JournalEntry) -> dict[str, object]:
    return {
        "type": entry.type.value,
        "name": entry.name,
        "servings": entry.servings,
        "calories": round(entry.calories, 1),
        "protein": round(entry.protein_g, 1),
        "fat": round(entry.fat_g, 1),
        "carbs": round(entry.carbs_g, 1),
    }


def _recipe_payload(recipe: Recipe) -> dict[str, object]:
    return {
        "name": recipe.name,
        "servings": recipe.servings,
        "ingredients": [
            {
                "name": line.ingredient.name,
                "servings": round(line_multiplier(line), 2),
                "weight_grams": line.weight_grams,
                "calories": round(
                    line.ingredient.calories * line_multiplier(line), 1
                ),
            }
            for line in recipe.ingredients
        ],
        "nutrition": _nutrition_payload(recipe_nutrition(recipe)),
        "per_serving": _nutrition_payload(recipe_nutrition_per_serving(recipe)),
    }


_TOOLS: dict[str, Tool] = {
    "list_recipes": Tool(
        "List all recipes with their calories", NoArguments, _list_recipes
    ),
    "show_recipe": Tool(
        "Show a recipe's ingredients and nutrition", RecipeNameArgs, _show_recipe
    ),
    "create_recipe": Tool(
        "Create a recipe from ingredient names and amounts",
        CreateRecipeArgs,
        _create_recipe,
    ),
    "rename_recipe": Tool(
        "Rename an existing recipe", RenameRecipeArgs, _rename_recipe
    ),
    "delete_recipe": Tool(
        "Delete a recipe and its ingredient lines", RecipeNameArgs, _delete_recipe
    ),
    "search_ingredient": Tool(
        "Search the nutrition database for ingredients",
        SearchIngredientArgs,
        _search_ingredient,
    ),
    "add_ingredient_to_journal": Tool(
        "Add servings or a weight of an ingredient to a day's journal",
        AddIngredientArgs,
        _add_ingredient_to_journal,
    ),
    "add_recipe_to_journal": Tool(
        "Add servings of a recipe to a day's journal",
        AddRecipeArgs,
        _add_recipe_to_journal,
    ),
    "get_journal_summary": Tool(
        "Get entries and nutrition totals for a day", DateArgs, _get_journal_summary
    ),
    "reset_journal": Tool(
        "Remove every entry from a day's journal", DateArgs, _reset_journal
    ),
    "create_custom_ingredient": Tool(
        "Create an ingredient with manual nutrition data",
        CustomIngredientArgs,
        _create_custom_ingredient,
    ),
    "customize_ingredient": Tool(
        "Derive a new ingredient version from a stored one",
        CustomizeIngredientArgs,
        _customize_ingredient,
    ),
}
