import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure the project root is on sys.path so `import diabetes_backend` works when
# running pytest from the repository root.
ROOT_DIR = Path(__file__).resolve().parents[2]  # repository root
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from diabetes_backend.app import create_app
from diabetes_backend.auth.jwt import create_access_token
from diabetes_backend.config import Settings
from diabetes_backend.ratelimit import limiter
from diabetes_backend.seed_data import seed_defaults
from diabetes_backend.services.memory_store import InMemoryStore
from diabetes_backend.services.sql_store import SqlStore


def make_settings(**overrides) -> Settings:
    values = dict(
        DATA_STORE="memory",
        DATABASE_URL="sqlite://",
        SQL_ECHO=False,
        SCORING_STRATEGY="rule_based",
        SEED_DEFAULTS=True,
        JWT_SECRET="test-secret",
        ACCESS_TOKEN_EXPIRE_MINUTES=5,
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="s3cret-pass",
        CORS_ORIGINS=["*"],
        DIAGNOSIS_RATE_LIMIT="1000/minute",
        LOG_LEVEL="WARNING",
        HOST="127.0.0.1",
        PORT=3000,
    )
    values.update(overrides)
    return Settings(**values)


def _build_store(kind: str):
    if kind == "sql":
        # In-memory SQLite shared across connections (StaticPool)
        store = SqlStore.from_url("sqlite://")
        store.init_schema()
    else:
        store = InMemoryStore()
    seed_defaults(store)
    return store


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def memory_store():
    store = _build_store("memory")
    yield store
    store.close()


@pytest.fixture
def sql_store():
    store = _build_store("sql")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs the dependent test once per store implementation."""
    store = _build_store(request.param)
    yield store
    store.close()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    # ensure limiter state fresh each test
    limiter.reset()
    yield


@pytest.fixture
def app(store, settings):
    return create_app(store, settings=settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_headers(settings):
    token = create_access_token(
        {"sub": settings.ADMIN_USERNAME, "role": "admin"},
        settings.JWT_SECRET,
    )
    return {"Authorization": f"Bearer {token}"}
