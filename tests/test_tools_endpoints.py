"""Tests for the tool-dispatch endpoints."""

from fastapi.testclient import TestClient
from httpx import Response

from macro_util.api.app import create_app
from tests.conftest import make_ingredient

HEADERS = {"X-Tool-Token": "tool-token"}
DAY = "2024-03-14"

_TWO_MILKS = {
    "branded": [
        {"food_name": "Whole Milk", "brand_name": "Horizon", "serving_unit": "cup"}
    ],
    "common": [{"food_name": "skim milk", "serving_unit": "cup"}],
}


def _call(client: TestClient, tool: str, **arguments: object) -> Response:
    return client.post(f"/tools/{tool}", json={"arguments": arguments}, headers=HEADERS)


def test_tools_require_token(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/tools").status_code == 401
    response = client.get("/tools", headers={"X-Tool-Token": "wrong"})
    assert response.status_code == 401
    response = client.post("/tools/list_recipes", json={"arguments": {}})
    assert response.status_code == 401


def test_health(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_list_tools_exposes_schemas(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/tools", headers=HEADERS)

    assert response.status_code == 200
    tools = {tool["name"]: tool for tool in response.json()["tools"]}
    assert "add_ingredient_to_journal" in tools
    assert "customize_ingredient" in tools
    schema = tools["add_ingredient_to_journal"]["input_schema"]
    assert "food_name" in schema["required"]


def test_unknown_tool_and_bad_arguments(container) -> None:
    client = TestClient(create_app(container))

    assert _call(client, "make_coffee").status_code == 404
    response = _call(client, "show_recipe")
    assert response.status_code == 422


def test_add_ingredient_by_weight(container) -> None:
    client = TestClient(create_app(container))

    response = _call(
        client, "add_ingredient_to_journal", food_name="banana", amount="236g", date=DAY
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "added"
    assert data["saved"] is True
    assert data["entry"]["calories"] == 210
    assert data["entry"]["servings"] == 2
    assert "2.0 servings (236g)" in data["message"]

    summary = _call(client, "get_journal_summary", date=DAY).json()
    assert summary["nutrition"]["calories"] == 210
    assert [entry["name"] for entry in summary["entries"]] == ["banana"]
    assert container.ingredient_service.get("banana").is_stored


def test_add_ingredient_without_saving(container) -> None:
    client = TestClient(create_app(container))

    response = _call(
        client, "add_ingredient_to_journal", food_name="banana", date=DAY, save=False
    )

    assert response.status_code == 200
    assert response.json()["saved"] is False
    assert container.ingredient_service.repository.get_ingredient("banana") is None


def test_add_ingredient_choice_flow(container, nutritionix_client) -> None:
    nutritionix_client.instant_payload = _TWO_MILKS
    client = TestClient(create_app(container))

    choose = _call(client, "add_ingredient_to_journal", food_name="milk", date=DAY)
    assert choose.json()["status"] == "choose"
    assert [item["name"] for item in choose.json()["options"]] == [
        "Whole Milk (Horizon)",
        "skim milk",
    ]
    assert choose.json()["none_of_these"] == 3

    retry = _call(
        client, "add_ingredient_to_journal", food_name="milk", date=DAY, choice=3
    )
    assert retry.json()["status"] == "retry"

    invalid = _call(
        client, "add_ingredient_to_journal", food_name="milk", date=DAY, choice=7
    )
    assert invalid.status_code == 422
    assert invalid.json()["detail"]["reason"] == "choice"

    added = _call(
        client, "add_ingredient_to_journal", food_name="milk", date=DAY, choice=2
    )
    assert added.status_code == 200
    assert added.json()["entry"]["name"] == "skim milk"
    assert nutritionix_client.nutrient_queries[-1] == "skim milk"


def test_add_ingredient_errors(container, nutritionix_client) -> None:
    client = TestClient(create_app(container))

    bad_date = _call(
        client, "add_ingredient_to_journal", food_name="banana", date="03/14"
    )
    assert bad_date.status_code == 422
    assert bad_date.json()["detail"]["reason"] == "date"

    bad_amount = _call(
        client, "add_ingredient_to_journal", food_name="banana", amount="lots"
    )
    assert bad_amount.status_code == 422
    assert bad_amount.json()["detail"]["reason"] == "not_a_number"

    nutritionix_client.nutrients_payload = {"foods": []}
    missing = _call(client, "add_ingredient_to_journal", food_name="zzz", date=DAY)
    assert missing.status_code == 404


def test_recipe_lifecycle(container, ingredient_repository) -> None:
    ingredient_repository.save_ingredient(
        make_ingredient("Eggs", calories=70, protein_g=6, fat_g=5, carbs_g=0.5)
    )
    ingredient_repository.save_ingredient(
        make_ingredient("Cheese", calories=110, protein_g=7, fat_g=9, carbs_g=1)
    )
    client = TestClient(create_app(container))

    created = _call(
        client,
        "create_recipe",
        name="Omelette",
        servings=2,
        ingredients=[
            {"name": "eggs", "amount": 2},
            {"name": "cheese", "amount": "1"},
        ],
    )

    assert created.status_code == 200
    recipe = created.json()
    assert recipe["skipped"] == []
    assert recipe["nutrition"]["calories"] == 250
    assert recipe["per_serving"]["calories"] == 125

    listed = _call(client, "list_recipes").json()
    assert listed["recipes"][0]["name"] == "Omelette"

    shown = _call(client, "show_recipe", recipe_name="omelette").json()
    assert [line["name"] for line in shown["ingredients"]] == ["Eggs", "Cheese"]

    duplicate = _call(
        client,
        "create_recipe",
        name="omelette",
        ingredients=[{"name": "eggs", "amount": 1}],
    )
    assert duplicate.status_code == 409

    logged = _call(
        client, "add_recipe_to_journal", recipe_name="Omelette", servings=1.5, date=DAY
    )
    assert logged.status_code == 200
    assert logged.json()["entry"]["calories"] == 187.5
    assert logged.json()["entry"]["type"] == "RECIPE"


def test_create_recipe_needs_a_resolved_line(container, nutritionix_client) -> None:
    nutritionix_client.nutrients_payload = {"foods": []}
    client = TestClient(create_app(container))

    response = _call(
        client,
        "create_recipe",
        name="Mystery",
        ingredients=[{"name": "unobtainium", "amount": 1}],
    )

    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "ingredients"


def test_add_missing_recipe(container) -> None:
    client = TestClient(create_app(container))

    response = _call(client, "add_recipe_to_journal", recipe_name="Nope", date=DAY)

    assert response.status_code == 404
    assert response.json()["detail"] == "'Nope' not found"


def test_reset_journal(container) -> None:
    client = TestClient(create_app(container))
    _call(client, "add_ingredient_to_journal", food_name="banana", date=DAY)

    reset = _call(client, "reset_journal", date=DAY)
    assert reset.status_code == 200
    summary = _call(client, "get_journal_summary", date=DAY).json()
    assert summary["entries"] == []
    assert summary["nutrition"]["calories"] == 0
    assert _call(client, "reset_journal", date=DAY).status_code == 404


def test_search_ingredient(container, nutritionix_client) -> None:
    nutritionix_client.instant_payload = _TWO_MILKS
    client = TestClient(create_app(container))

    response = _call(client, "search_ingredient", query="milk")

    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) == 2
    assert results[0]["saved"] is False


def test_custom_and_customized_ingredients(container) -> None:
    client = TestClient(create_app(container))

    created = _call(
        client,
        "create_custom_ingredient",
        name="Protein Shake",
        serving_size=1,
        serving_unit="bottle",
        serving_weight_grams=330,
        calories=160,
        protein=30,
        fat=2,
        carbs=5,
    )
    assert created.status_code == 200
    assert created.json()["ingredient"]["saved"] is True

    duplicate = _call(
        client,
        "create_custom_ingredient",
        name="protein shake",
        serving_size=1,
        serving_unit="bottle",
        calories=160,
        protein=30,
        fat=2,
        carbs=5,
    )
    assert duplicate.status_code == 409

    customized = _call(
        client,
        "customize_ingredient",
        name="Protein Shake",
        new_name="Big Protein Shake",
        serving_weight_grams=660,
    )
    assert customized.status_code == 200
    assert customized.json()["ingredient"]["calories"] == 320

    missing = _call(client, "customize_ingredient", name="Nothing", protein=1)
    assert missing.status_code == 404


def test_rejected_amount_leaves_store_untouched(container) -> None:
    client = TestClient(create_app(container))

    response = _call(
        client,
        "add_ingredient_to_journal",
        food_name="banana",
        amount="abc",
        date=DAY,
        save=True,
    )

    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "not_a_number"
    assert container.ingredient_service.repository.get_ingredient("banana") is None
    assert _call(client, "get_journal_summary", date=DAY).json()["entries"] == []


def test_weight_without_basis_leaves_store_untouched(
    container, nutritionix_client
) -> None:
    food = dict(nutritionix_client.nutrients_payload["foods"][0])
    food["serving_weight_grams"] = None
    nutritionix_client.nutrients_payload = {"foods": [food]}
    client = TestClient(create_app(container))

    response = _call(
        client, "add_ingredient_to_journal", food_name="banana", amount="150g", date=DAY
    )

    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "no_weight_basis"
    assert container.ingredient_service.repository.get_ingredient("banana") is None


def test_rename_and_delete_recipe(container, ingredient_repository) -> None:
    ingredient_repository.save_ingredient(make_ingredient("Lentils"))
    client = TestClient(create_app(container))
    for name in ("Soup", "Dal"):
        _call(
            client,
            "create_recipe",
            name=name,
            ingredients=[{"name": "lentils", "amount": 1}],
        )

    renamed = _call(client, "rename_recipe", recipe_name="soup", new_name="Stew")
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Stew"
    assert _call(client, "show_recipe", recipe_name="Soup").status_code == 404

    conflict = _call(client, "rename_recipe", recipe_name="Stew", new_name="Dal")
    assert conflict.status_code == 409
    blank = _call(client, "rename_recipe", recipe_name="Stew", new_name=" ")
    assert blank.status_code == 422

    deleted = _call(client, "delete_recipe", recipe_name="stew")
    assert deleted.status_code == 200
    assert _call(client, "delete_recipe", recipe_name="stew").status_code == 404
    names = [r["name"] for r in _call(client, "list_recipes").json()["recipes"]]
    assert names == ["Dal"]
