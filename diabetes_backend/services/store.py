"""Data store interface shared by the in-memory and SQL backends.

The HTTP layer receives one store instance through ``app.state.store``; the
process entry point builds it and closes it on shutdown.
"""

from typing import Dict, Iterable, List, Optional

from diabetes_backend.models import Diagnosis, Recommendation, Symptom, User

TIERS = ("Low", "Medium", "High")


class DataStoreError(Exception):
    """The backing store could not complete an operation."""


class DuplicateRecordError(DataStoreError):
    """A record with the same natural key already exists."""


class DataStore:
    name = "abstract"

    # ---- users ----
    def list_users(self) -> List[User]:
        raise NotImplementedError

    def get_user(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def find_user_by_name(self, name: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, name: str, age: Optional[int] = None, sex: Optional[str] = None) -> User:
        raise NotImplementedError

    def delete_user(self, user_id: str) -> bool:
        raise NotImplementedError

    # ---- symptoms ----
    def list_symptoms(self) -> List[Symptom]:
        raise NotImplementedError

    def get_symptom(self, code: str) -> Optional[Symptom]:
        raise NotImplementedError

    def create_symptom(self, code: str, label: str, weight: int = 1) -> Symptom:
        raise NotImplementedError

    def update_symptom(
        self, code: str, label: Optional[str] = None, weight: Optional[int] = None
    ) -> Optional[Symptom]:
        raise NotImplementedError

    def delete_symptom(self, code: str) -> bool:
        raise NotImplementedError

    # ---- diagnoses ----
    def list_diagnoses(self, user_id: Optional[str] = None) -> List[Diagnosis]:
        raise NotImplementedError

    def get_diagnosis(self, diagnosis_id: int) -> Optional[Diagnosis]:
        raise NotImplementedError

    def save_diagnosis(
        self,
        user_id: Optional[str],
        risk_tier: str,
        score: float,
        symptom_codes: Iterable[str],
        matched_rule: Optional[str] = None,
    ) -> Diagnosis:
        raise NotImplementedError

    def delete_diagnosis(self, diagnosis_id: int) -> bool:
        raise NotImplementedError

    # ---- recommendations ----
    def list_recommendations(self, risk_tier: Optional[str] = None) -> List[Recommendation]:
        """All recommendations, or those for ``risk_tier`` plus the tier-less ones."""
        raise NotImplementedError

    def create_recommendation(
        self, title: str, description: str, risk_tier: Optional[str] = None
    ) -> Recommendation:
        raise NotImplementedError

    def delete_recommendation(self, recommendation_id: int) -> bool:
        raise NotImplementedError

    # ---- housekeeping ----
    def stats(self) -> Dict[str, object]:
        raise NotImplementedError

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        return None


def empty_tier_counts() -> Dict[str, int]:
    return {tier: 0 for tier in TIERS}


__all__ = ["DataStore", "DataStoreError", "DuplicateRecordError", "TIERS", "empty_tier_counts"]
