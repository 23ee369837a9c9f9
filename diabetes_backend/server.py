"""Process entry point: owns the data store lifecycle and runs uvicorn."""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from diabetes_backend.app import create_app
from diabetes_backend.config import Settings, load_settings
from diabetes_backend.seed_data import seed_defaults
from diabetes_backend.services.memory_store import InMemoryStore
from diabetes_backend.services.sql_store import SqlStore
from diabetes_backend.services.store import DataStore
from diabetes_backend.utils.log import configure_logging

logger = logging.getLogger("diabetes")


def build_store(settings: Settings) -> DataStore:
    """Build the configured store, creating tables and seeding defaults when enabled."""
    if settings.uses_memory_store:
        store: DataStore = InMemoryStore()
    else:
        sql_store = SqlStore.from_url(settings.DATABASE_URL, echo=settings.SQL_ECHO)
        sql_store.init_schema()
        store = sql_store
    if settings.SEED_DEFAULTS:
        seed_defaults(store)
    logger.info({"function": "build_store", "store": store.name})
    return store


def create_app_from_env(settings: Optional[Settings] = None) -> FastAPI:
    """Factory for ``uvicorn --factory diabetes_backend.server:create_app_from_env``."""
    settings = settings or load_settings()
    configure_logging(settings.LOG_LEVEL)
    store = build_store(settings)
    return create_app(store, settings=settings, close_store_on_shutdown=True)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.LOG_LEVEL)
    store = build_store(settings)
    try:
        app = create_app(store, settings=settings)
        uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
    finally:
        store.close()
        logger.info({"function": "main", "status": "stopped"})


if __name__ == "__main__":
    main()
