import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recepti.main import app
from recepti.db import Base, get_db
from recepti.deps import get_cdn_paths, get_storage
from recepti.infra import redis_client
from recepti.infra.path_cache import MemoryPathCache
from recepti.services.cdn_paths import CdnPathNormalizer
from recepti.services.recipe_repo import RecipeRepository
from recepti.services.storage import LocalStorage

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool  # Important for in-memory to share connection across sessions
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cdn_root(tmp_path):
    root = tmp_path / "cdn"
    root.mkdir()
    return root


@pytest.fixture
def storage(cdn_root):
    return LocalStorage(cdn_root)


@pytest.fixture
def cdn_paths(storage):
    return CdnPathNormalizer(storage, MemoryPathCache(max_entries=128, ttl_seconds=60))


@pytest.fixture
def client(storage, cdn_paths):
    """Test client with DB and CDN root overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_cdn_paths] = lambda: cdn_paths
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def repo(db_session, cdn_paths):
    return RecipeRepository(db_session, cdn_paths, max_slug_attempts=5)


@pytest.fixture
def write_file(cdn_root):
    """Create a file under the CDN root: write_file("recipes/x/hero.webp")."""
    def _write(rel_path: str, data: bytes = b"img"):
        path = cdn_root / rel_path.lstrip("/")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    return _write


def recipe_payload(**overrides):
    payload = {
        "title": "Test Recipe",
        "lead": "A short lead for the recipe.",
        "prepTimeMinutes": 20,
        "servings": 4,
        "difficulty": "EASY",
        "dishGroup": "MAIN",
        "cookingMethod": "BAKE",
        "tags": ["quick"],
        "ingredients": [{"name": "flour", "amount": 200, "unit": "g"}, {"name": "salt"}],
        "steps": [{"text": "Mix everything."}, {"text": "Bake for 20 minutes."}],
        "imageCdnPath": "/recipes/test-recipe/hero.png",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return recipe_payload


import fakeredis


@pytest.fixture(autouse=True)
def mock_redis():
    fake = fakeredis.FakeRedis(decode_responses=True)

    # Force the client into the infra module
    redis_client._redis_sync = fake

    yield fake

    # Cleanup
    redis_client._redis_sync = None
