# diabetes_backend/create_tables.py
import sys
from pathlib import Path

from dotenv import load_dotenv

# Allow running from the package directory without PYTHONPATH tweaks
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

ENV_PATH = ROOT_DIR / "diabetes_backend" / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH, override=True)

from diabetes_backend.config import load_settings
from diabetes_backend.services.sql_store import SqlStore


def main():
    settings = load_settings()
    store = SqlStore.from_url(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    print("Creating tables...")
    try:
        store.init_schema()
    finally:
        store.close()
    print("Tables created.")


if __name__ == "__main__":
    main()
