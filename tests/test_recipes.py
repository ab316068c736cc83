"""Tests for the recipes API.

Tests cover:
- Recipe CRUD by slug with the {data: ...} envelope
- Error envelope for validation/not-found/conflict
- List filters
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from recepti.deps import get_repository
from recepti.main import app
from recepti.models import Recipe
from recepti.schemas import RecipeCreate
from recepti.services.recipe_repo import RecipeRepository

from conftest import recipe_payload


def test_create_recipe_returns_envelope(client):
    response = client.post("/api/recipes", json=recipe_payload())
    assert response.status_code == 201

    data = response.json()["data"]
    assert data["slug"] == "test-recipe"
    assert data["title"] == "Test Recipe"
    assert data["prepTimeMinutes"] == 20
    assert data["dishGroup"] == "MAIN"
    assert data["ingredients"] == [
        {"name": "flour", "amount": 200, "unit": "g"},
        {"name": "salt"},
    ]
    assert data["steps"][1]["text"] == "Bake for 20 minutes."
    assert data["images"] == {"hero": {"cdnPath": "/recipes/test-recipe/hero.png"}}
    assert "createdAt" in data and "updatedAt" in data


def test_create_recipe_collision_appends_suffix(client):
    first = client.post("/api/recipes", json=recipe_payload())
    second = client.post("/api/recipes", json=recipe_payload())
    third = client.post("/api/recipes", json=recipe_payload())

    assert first.json()["data"]["slug"] == "test-recipe"
    assert second.json()["data"]["slug"] == "test-recipe-2"
    assert third.json()["data"]["slug"] == "test-recipe-3"


def test_create_recipe_explicit_slug_is_slugified(client):
    response = client.post("/api/recipes", json=recipe_payload(slug="Moj Recept!"))
    assert response.status_code == 201
    assert response.json()["data"]["slug"] == "moj-recept"


def test_create_recipe_unsluggable_title_is_bad_request(client):
    response = client.post("/api/recipes", json=recipe_payload(title="!!!???"))
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "BAD_REQUEST"
    assert error["message"] == "Slug could not be generated"


def test_create_recipe_invalid_payload(client):
    response = client.post("/api/recipes", json={"title": "x"})
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Invalid payload"
    assert error["details"]


def test_create_recipe_non_json_body(client):
    response = client.post(
        "/api/recipes", content=b"not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.fixture
def single_attempt_repo(db_session, cdn_paths):
    repo = RecipeRepository(db_session, cdn_paths, max_slug_attempts=1)
    app.dependency_overrides[get_repository] = lambda: repo
    return repo


def test_create_recipe_slug_conflict_is_409(client, single_attempt_repo):
    single_attempt_repo.create(RecipeCreate.model_validate(recipe_payload()))

    # Probe reports the slug free, so the insert hits the unique constraint
    single_attempt_repo._slug_taken = lambda slug: False

    response = client.post("/api/recipes", json=recipe_payload())
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "CONFLICT"
    assert error["message"] == "Recipe slug must be unique"


def test_create_recipe_other_integrity_error_is_500(client, single_attempt_repo, monkeypatch):
    def failing_commit():
        raise IntegrityError(
            "INSERT INTO recipes", {}, Exception("NOT NULL constraint failed: recipes.title")
        )

    monkeypatch.setattr(single_attempt_repo.db, "commit", failing_commit)

    with TestClient(app, raise_server_exceptions=False) as c:
        response = c.post("/api/recipes", json=recipe_payload())

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "INTERNAL"
    assert error["message"] == "Unexpected error"


def test_get_recipe_by_slug(client):
    client.post("/api/recipes", json=recipe_payload())

    response = client.get("/api/recipes/test-recipe")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["slug"] == "test-recipe"
    assert data["servings"] == 4
    assert data["tags"] == ["quick"]


def test_get_recipe_not_found(client):
    response = client.get("/api/recipes/nope")
    assert response.status_code == 404
    assert response.json() == {"error": {"code": "NOT_FOUND", "message": "Recipe not found"}}


def test_list_recipes_projection_and_order(client, db_session):
    client.post("/api/recipes", json=recipe_payload(title="Older Recipe"))
    client.post("/api/recipes", json=recipe_payload(title="Newer Recipe"))

    # Pin timestamps so ordering doesn't depend on clock resolution
    now = datetime.now(timezone.utc)
    db_session.query(Recipe).filter_by(slug="older-recipe").update({"created_at": now - timedelta(hours=1)})
    db_session.query(Recipe).filter_by(slug="newer-recipe").update({"created_at": now})
    db_session.commit()

    response = client.get("/api/recipes")
    assert response.status_code == 200

    items = response.json()["data"]
    assert [r["slug"] for r in items] == ["newer-recipe", "older-recipe"]
    for item in items:
        assert "ingredients" not in item
        assert "steps" not in item
        assert "servings" not in item
        assert "tags" not in item
        assert item["imageCdnPath"]


def test_list_recipes_filters(client):
    client.post("/api/recipes", json=recipe_payload(title="Chocolate Cake", dishGroup="DESSERT"))
    client.post("/api/recipes", json=recipe_payload(title="Tomato Soup", dishGroup="SOUP", cookingMethod="BOIL"))

    by_group = client.get("/api/recipes", params={"dishGroup": "SOUP"}).json()["data"]
    assert [r["slug"] for r in by_group] == ["tomato-soup"]

    by_text = client.get("/api/recipes", params={"q": "chocolate"}).json()["data"]
    assert [r["slug"] for r in by_text] == ["chocolate-cake"]

    by_method = client.get("/api/recipes", params={"cookingMethod": "GRILL"}).json()["data"]
    assert by_method == []


def test_list_recipes_search_treats_wildcards_literally(client):
    client.post("/api/recipes", json=recipe_payload(title="100% Rye Bread"))
    client.post("/api/recipes", json=recipe_payload(title="Plain Rye Bread"))

    by_percent = client.get("/api/recipes", params={"q": "%"}).json()["data"]
    assert [r["slug"] for r in by_percent] == ["100-rye-bread"]

    by_underscore = client.get("/api/recipes", params={"q": "_"}).json()["data"]
    assert by_underscore == []


def test_list_recipes_invalid_filter(client):
    response = client.get("/api/recipes", params={"difficulty": "IMPOSSIBLE"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_update_recipe_partial(client):
    client.post("/api/recipes", json=recipe_payload())

    response = client.put("/api/recipes/test-recipe", json={"title": "Renamed Recipe", "servings": 6})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["title"] == "Renamed Recipe"
    assert data["servings"] == 6
    # Slug is stable across renames
    assert data["slug"] == "test-recipe"
    assert data["lead"] == "A short lead for the recipe."


def test_update_recipe_image_path_keeps_image_siblings(client):
    client.post(
        "/api/recipes",
        json=recipe_payload(
            images={
                "hero": {"cdnPath": "/old.webp", "alt": "Old hero"},
                "gallery": [{"cdnPath": "/recipes/test-recipe/1.jpg"}],
            }
        ),
    )

    response = client.put("/api/recipes/test-recipe", json={"imageCdnPath": "/recipes/test-recipe/new.webp"})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["imageCdnPath"] == "/recipes/test-recipe/new.webp"
    assert data["images"]["hero"] == {"cdnPath": "/recipes/test-recipe/new.webp", "alt": "Old hero"}
    assert data["images"]["gallery"] == [{"cdnPath": "/recipes/test-recipe/1.jpg"}]


def test_update_recipe_not_found(client):
    response = client.put("/api/recipes/missing", json={"title": "Whatever"})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_update_recipe_invalid_payload(client):
    client.post("/api/recipes", json=recipe_payload())

    response = client.put("/api/recipes/test-recipe", json={"servings": 0})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_update_recipe_rejects_null(client):
    client.post("/api/recipes", json=recipe_payload())

    response = client.put("/api/recipes/test-recipe", json={"title": None})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
