from recepti.routers.dev import SAMPLE_RECIPES
from recepti.settings import settings


def test_ready(client):
    response = client.get("/api/ready")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "db_ok": True, "redis_ok": None}


def test_ready_checks_redis_when_it_backs_the_cache(client, monkeypatch):
    monkeypatch.setattr(settings, "cdn_path_cache_backend", "redis")

    response = client.get("/api/ready")
    assert response.json()["redis_ok"] is True


def test_seed_is_idempotent(client):
    first = client.post("/api/dev/seed")
    assert first.status_code == 200
    assert first.json()["recipes_created"] == len(SAMPLE_RECIPES)

    second = client.post("/api/dev/seed")
    assert second.json()["recipes_created"] == 0

    listed = client.get("/api/recipes").json()["data"]
    assert sorted(r["slug"] for r in listed) == sorted(r["slug"] for r in SAMPLE_RECIPES)


def test_seeded_recipe_keeps_diacritics(client):
    client.post("/api/dev/seed")

    recipe = client.get("/api/recipes/cokoladni-muffini").json()["data"]
    assert recipe["title"] == "Čokoladni muffini"
    assert recipe["images"]["hero"]["cdnPath"] == "/recipes/cokoladni-muffini/hero.svg"


def test_seed_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "dev_routes_enabled", False)

    response = client.post("/api/dev/seed")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
