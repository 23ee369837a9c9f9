# Mark services as a package and expose key service modules for tests to monkeypatch.

from . import classifier as classifier  # noqa: F401
from . import diagnosis as diagnosis  # noqa: F401
from . import store as store  # noqa: F401

__all__ = [
    "classifier",
    "diagnosis",
    "store",
]
