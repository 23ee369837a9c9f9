# diabetes_backend/seed_data.py
import logging
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

from diabetes_backend.services.store import DataStore

logger = logging.getLogger("diabetes")

# (code, label, weight)
DEFAULT_SYMPTOMS = [
    ("G01", "Frequent urination (polyuria)", 5),
    ("G02", "Excessive thirst (polydipsia)", 4),
    ("G03", "Constant hunger (polyphagia)", 3),
    ("G04", "Unexplained weight loss", 4),
    ("G05", "Fatigue and weakness", 2),
    ("G06", "Blurred vision", 3),
]

# (title, description, risk tier or None for every tier)
DEFAULT_RECOMMENDATIONS = [
    ("See a doctor", "Contact a doctor for a blood sugar test (HbA1c).", None),
    ("Diet", "Cut down on refined carbohydrates and sugary food and drink.", None),
    ("Urgent check-up", "Book a fasting glucose test within the next few days.", "High"),
    ("Stay active", "Aim for at least 150 minutes of moderate exercise per week.", "Medium"),
    ("Routine screening", "Repeat the screening once a year.", "Low"),
]


def seed_defaults(store: DataStore) -> dict:
    """Insert the default vocabulary and advice when the tables are empty."""
    added = {"symptoms": 0, "recommendations": 0}
    for code, label, weight in DEFAULT_SYMPTOMS:
        if store.get_symptom(code) is None:
            store.create_symptom(code, label, weight)
            added["symptoms"] += 1
    if not store.list_recommendations():
        for title, description, tier in DEFAULT_RECOMMENDATIONS:
            store.create_recommendation(title, description, tier)
            added["recommendations"] += 1
    logger.info({"function": "seed_defaults", "store": store.name, **added})
    return added


def main():
    from diabetes_backend.config import load_settings
    from diabetes_backend.services.sql_store import SqlStore

    settings = load_settings()
    store = SqlStore.from_url(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    try:
        store.init_schema()
        added = seed_defaults(store)
    finally:
        store.close()
    print(f"Seeded {added['symptoms']} symptoms and {added['recommendations']} recommendations")


if __name__ == "__main__":
    main()
