# diabetes_backend/models/__init__.py
from sqlalchemy.engine import Engine

from diabetes_backend.db.session import Base

# Import model modules so SQLAlchemy registers all mappers.
from . import user  # noqa: F401
from . import symptom  # noqa: F401
from . import diagnosis  # noqa: F401
from . import recommendation  # noqa: F401

from .user import User
from .symptom import Symptom
from .diagnosis import Diagnosis
from .recommendation import Recommendation


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(bind=engine)


__all__ = ["Base", "User", "Symptom", "Diagnosis", "Recommendation", "init_db"]
