import pytest

from diabetes_backend.config import load_settings
from diabetes_backend.server import build_store
from diabetes_backend.services.memory_store import InMemoryStore
from diabetes_backend.services.sql_store import SqlStore
from conftest import make_settings


def test_defaults(monkeypatch):
    for name in ("DATA_STORE", "SCORING_STRATEGY", "PORT", "CORS_ORIGINS", "SEED_DEFAULTS"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.DATA_STORE == "sql"
    assert settings.SCORING_STRATEGY == "rule_based"
    assert settings.PORT == 3000
    assert settings.CORS_ORIGINS == ["*"]
    assert settings.SEED_DEFAULTS is True
    assert not settings.uses_memory_store


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATA_STORE", "Mock")
    monkeypatch.setenv("PORT", "not-a-number")
    monkeypatch.setenv("SEED_DEFAULTS", "off")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test ,")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.uses_memory_store
    assert settings.PORT == 3000
    assert settings.SEED_DEFAULTS is False
    assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert settings.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize("data_store, store_type", [("memory", InMemoryStore), ("sql", SqlStore)])
def test_build_store(data_store, store_type):
    store = build_store(make_settings(DATA_STORE=data_store, DATABASE_URL="sqlite://"))
    try:
        assert isinstance(store, store_type)
        assert len(store.list_symptoms()) == 6
    finally:
        store.close()


def test_build_store_without_seeding():
    store = build_store(make_settings(SEED_DEFAULTS=False))
    try:
        assert store.list_symptoms() == []
        assert store.list_recommendations() == []
    finally:
        store.close()


def test_unknown_strategy_fails_fast(memory_store):
    from diabetes_backend.app import create_app

    with pytest.raises(ValueError):
        create_app(memory_store, settings=make_settings(SCORING_STRATEGY="bayes"))
