import os

# Importing ``greeting_card_api.app`` builds the module-level application;
# keep it off the filesystem.
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from greeting_card_api.app.core.config import Settings  # noqa: E402
from greeting_card_api.app.main import create_app  # noqa: E402
from greeting_card_api.app.services.greeting_store import (  # noqa: E402
    MemoryGreetingStore,
    SQLiteGreetingStore,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="memory", public_base_url=None, cors_origins=[])


@pytest.fixture
def memory_store() -> MemoryGreetingStore:
    return MemoryGreetingStore()


@pytest.fixture
def sqlite_store(tmp_path) -> SQLiteGreetingStore:
    store = SQLiteGreetingStore(str(tmp_path / "greetings.db"))
    store.init()
    return store


@pytest.fixture(params=["memory", "sqlite"])
def store(request, memory_store, tmp_path):
    """Every API test runs against both backends."""
    if request.param == "memory":
        return memory_store
    return SQLiteGreetingStore(str(tmp_path / "api.db"))


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def memory_client(settings, memory_store) -> TestClient:
    return TestClient(create_app(settings=settings, store=memory_store))
