import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

if ENV_PATH.exists():
    load_dotenv(ENV_PATH, override=False)


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None or value.strip() == "" else value.strip()


def _getenv_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (ValueError, TypeError):
        return default


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    DATA_STORE: str
    DATABASE_URL: str
    SQL_ECHO: bool
    SCORING_STRATEGY: str
    SEED_DEFAULTS: bool
    JWT_SECRET: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int
    ADMIN_USERNAME: str
    ADMIN_PASSWORD: str
    CORS_ORIGINS: List[str]
    DIAGNOSIS_RATE_LIMIT: str
    LOG_LEVEL: str
    HOST: str
    PORT: int

    @property
    def uses_memory_store(self) -> bool:
        return self.DATA_STORE.lower() in {"memory", "mock", "in-memory"}


def load_settings() -> Settings:
    """Read settings from the environment (and backend .env when present)."""
    return Settings(
        DATA_STORE=_getenv_str("DATA_STORE", "sql"),
        DATABASE_URL=_getenv_str("DATABASE_URL", "sqlite:///./diabetes.db"),
        SQL_ECHO=_getenv_bool("SQL_ECHO", False),
        SCORING_STRATEGY=_getenv_str("SCORING_STRATEGY", "rule_based"),
        SEED_DEFAULTS=_getenv_bool("SEED_DEFAULTS", True),
        JWT_SECRET=_getenv_str("JWT_SECRET", "dev-secret-change-me"),
        ACCESS_TOKEN_EXPIRE_MINUTES=_getenv_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60),
        ADMIN_USERNAME=_getenv_str("ADMIN_USERNAME", "admin"),
        ADMIN_PASSWORD=_getenv_str("ADMIN_PASSWORD", "admin123"),
        CORS_ORIGINS=_getenv_list("CORS_ORIGINS", ["*"]),
        DIAGNOSIS_RATE_LIMIT=_getenv_str("DIAGNOSIS_RATE_LIMIT", "30/minute"),
        LOG_LEVEL=_getenv_str("LOG_LEVEL", "INFO").upper(),
        HOST=_getenv_str("HOST", "0.0.0.0"),
        PORT=_getenv_int("PORT", 3000),
    )
