from __future__ import annotations

import itertools
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from diabetes_backend.models import Diagnosis, Recommendation, Symptom, User
from diabetes_backend.services.store import DataStore, DuplicateRecordError, empty_tier_counts

logger = logging.getLogger("diabetes")


class InMemoryStore(DataStore):
    """Process-local tables for demos and tests.

    Records are plain (transient) ORM instances, so the HTTP schemas serialize
    them exactly like rows coming from the SQL store.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._symptoms: Dict[str, Symptom] = {}
        self._diagnoses: Dict[int, Diagnosis] = {}
        self._recommendations: Dict[int, Recommendation] = {}
        self._symptom_ids = itertools.count(1)
        self._diagnosis_ids = itertools.count(1)
        self._recommendation_ids = itertools.count(1)

    # ---- users ----
    def list_users(self) -> List[User]:
        with self._lock:
            return sorted(self._users.values(), key=lambda u: u.created_at)

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(str(user_id))

    def find_user_by_name(self, name: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.name == name:
                    return user
        return None

    def create_user(self, name: str, age: Optional[int] = None, sex: Optional[str] = None) -> User:
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            age=age,
            sex=sex,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._users[user.id] = user
        return user

    def delete_user(self, user_id: str) -> bool:
        with self._lock:
            if self._users.pop(str(user_id), None) is None:
                return False
            # mirror the ORM cascade
            for did in [d.id for d in self._diagnoses.values() if d.user_id == str(user_id)]:
                del self._diagnoses[did]
            return True

    # ---- symptoms ----
    def list_symptoms(self) -> List[Symptom]:
        with self._lock:
            return sorted(self._symptoms.values(), key=lambda s: s.id)

    def get_symptom(self, code: str) -> Optional[Symptom]:
        with self._lock:
            return self._symptoms.get(code)

    def create_symptom(self, code: str, label: str, weight: int = 1) -> Symptom:
        with self._lock:
            if code in self._symptoms:
                raise DuplicateRecordError(f"Symptom '{code}' already exists")
            symptom = Symptom(id=next(self._symptom_ids), code=code, label=label, weight=weight)
            self._symptoms[code] = symptom
            return symptom

    def update_symptom(
        self, code: str, label: Optional[str] = None, weight: Optional[int] = None
    ) -> Optional[Symptom]:
        with self._lock:
            symptom = self._symptoms.get(code)
            if symptom is None:
                return None
            if label is not None:
                symptom.label = label
            if weight is not None:
                symptom.weight = weight
            return symptom

    def delete_symptom(self, code: str) -> bool:
        with self._lock:
            return self._symptoms.pop(code, None) is not None

    # ---- diagnoses ----
    def list_diagnoses(self, user_id: Optional[str] = None) -> List[Diagnosis]:
        with self._lock:
            items = [
                d for d in self._diagnoses.values()
                if user_id is None or d.user_id == str(user_id)
            ]
        return sorted(items, key=lambda d: d.id, reverse=True)

    def get_diagnosis(self, diagnosis_id: int) -> Optional[Diagnosis]:
        with self._lock:
            return self._diagnoses.get(int(diagnosis_id))

    def save_diagnosis(
        self,
        user_id: Optional[str],
        risk_tier: str,
        score: float,
        symptom_codes: Iterable[str],
        matched_rule: Optional[str] = None,
    ) -> Diagnosis:
        with self._lock:
            record = Diagnosis(
                id=next(self._diagnosis_ids),
                user_id=user_id,
                risk_tier=risk_tier,
                score=float(score),
                matched_rule=matched_rule,
                symptom_codes=list(symptom_codes),
                created_at=datetime.now(timezone.utc),
            )
            self._diagnoses[record.id] = record
        logger.info({
            "function": "save_diagnosis",
            "store": self.name,
            "diagnosis_id": record.id,
            "risk_tier": risk_tier,
        })
        return record

    def delete_diagnosis(self, diagnosis_id: int) -> bool:
        with self._lock:
            return self._diagnoses.pop(int(diagnosis_id), None) is not None

    # ---- recommendations ----
    def list_recommendations(self, risk_tier: Optional[str] = None) -> List[Recommendation]:
        with self._lock:
            items = sorted(self._recommendations.values(), key=lambda r: r.id)
        if risk_tier is None:
            return items
        return [r for r in items if r.risk_tier is None or r.risk_tier == risk_tier]

    def create_recommendation(
        self, title: str, description: str, risk_tier: Optional[str] = None
    ) -> Recommendation:
        with self._lock:
            rec = Recommendation(
                id=next(self._recommendation_ids),
                title=title,
                description=description,
                risk_tier=risk_tier,
            )
            self._recommendations[rec.id] = rec
            return rec

    def delete_recommendation(self, recommendation_id: int) -> bool:
        with self._lock:
            return self._recommendations.pop(int(recommendation_id), None) is not None

    # ---- housekeeping ----
    def stats(self) -> Dict[str, object]:
        with self._lock:
            by_tier = empty_tier_counts()
            for d in self._diagnoses.values():
                by_tier[d.risk_tier] = by_tier.get(d.risk_tier, 0) + 1
            return {
                "total_users": len(self._users),
                "total_diagnoses": len(self._diagnoses),
                "total_symptoms": len(self._symptoms),
                "total_recommendations": len(self._recommendations),
                "diagnoses_by_tier": by_tier,
            }

    def close(self) -> None:
        with self._lock:
            self._users.clear()
            self._symptoms.clear()
            self._diagnoses.clear()
            self._recommendations.clear()
