from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from sqlalchemy import func, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from diabetes_backend.db.session import make_engine, make_session_factory
from diabetes_backend.models import Diagnosis, Recommendation, Symptom, User, init_db
from diabetes_backend.services.store import (
    DataStore,
    DataStoreError,
    DuplicateRecordError,
    empty_tier_counts,
)

logger = logging.getLogger("diabetes")


class SqlStore(DataStore):
    """SQLAlchemy-backed store; one short-lived session per operation."""

    name = "sql"

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None):
        self.engine = engine
        self._session_factory = session_factory or make_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlStore":
        return cls(make_engine(database_url, echo=echo))

    def init_schema(self) -> None:
        try:
            init_db(self.engine)
        except SQLAlchemyError as exc:
            raise DataStoreError(f"Could not create tables: {exc}") from exc

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            try:
                db.rollback()
            except SQLAlchemyError:
                logger.warning("Rollback failed", exc_info=True)
            logger.error({"function": "sql_store", "status": "failed", "error": str(exc)})
            raise DataStoreError(str(exc)) from exc
        finally:
            db.close()

    # ---- users ----
    def list_users(self) -> List[User]:
        with self._session() as db:
            return db.query(User).order_by(User.created_at.asc()).all()

    def get_user(self, user_id: str) -> Optional[User]:
        with self._session() as db:
            return db.query(User).filter(User.id == str(user_id)).first()

    def find_user_by_name(self, name: str) -> Optional[User]:
        with self._session() as db:
            return db.query(User).filter(User.name == name).first()

    def create_user(self, name: str, age: Optional[int] = None, sex: Optional[str] = None) -> User:
        with self._session() as db:
            user = User(name=name, age=age, sex=sex)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user

    def delete_user(self, user_id: str) -> bool:
        with self._session() as db:
            user = db.query(User).filter(User.id == str(user_id)).first()
            if not user:
                return False
            db.delete(user)
            db.commit()
            return True

    # ---- symptoms ----
    def list_symptoms(self) -> List[Symptom]:
        with self._session() as db:
            return db.query(Symptom).order_by(Symptom.id.asc()).all()

    def get_symptom(self, code: str) -> Optional[Symptom]:
        with self._session() as db:
            return db.query(Symptom).filter(Symptom.code == code).first()

    def create_symptom(self, code: str, label: str, weight: int = 1) -> Symptom:
        with self._session() as db:
            if db.query(Symptom).filter(Symptom.code == code).first():
                raise DuplicateRecordError(f"Symptom '{code}' already exists")
            symptom = Symptom(code=code, label=label, weight=weight)
            db.add(symptom)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise DuplicateRecordError(f"Symptom '{code}' already exists") from exc
            db.refresh(symptom)
            return symptom

    def update_symptom(
        self, code: str, label: Optional[str] = None, weight: Optional[int] = None
    ) -> Optional[Symptom]:
        with self._session() as db:
            symptom = db.query(Symptom).filter(Symptom.code == code).first()
            if not symptom:
                return None
            if label is not None:
                symptom.label = label
            if weight is not None:
                symptom.weight = weight
            db.commit()
            db.refresh(symptom)
            return symptom

    def delete_symptom(self, code: str) -> bool:
        with self._session() as db:
            deleted = db.query(Symptom).filter(Symptom.code == code).delete(synchronize_session=False)
            db.commit()
            return deleted > 0

    # ---- diagnoses ----
    def list_diagnoses(self, user_id: Optional[str] = None) -> List[Diagnosis]:
        with self._session() as db:
            qry = db.query(Diagnosis)
            if user_id is not None:
                qry = qry.filter(Diagnosis.user_id == str(user_id))
            return qry.order_by(Diagnosis.id.desc()).all()

    def get_diagnosis(self, diagnosis_id: int) -> Optional[Diagnosis]:
        with self._session() as db:
            return db.query(Diagnosis).filter(Diagnosis.id == int(diagnosis_id)).first()

    def save_diagnosis(
        self,
        user_id: Optional[str],
        risk_tier: str,
        score: float,
        symptom_codes: Iterable[str],
        matched_rule: Optional[str] = None,
    ) -> Diagnosis:
        with self._session() as db:
            record = Diagnosis(
                user_id=user_id,
                risk_tier=risk_tier,
                score=float(score),
                matched_rule=matched_rule,
                symptom_codes=list(symptom_codes),
            )
            db.add(record)
            db.commit()
            db.refresh(record)
        logger.info({
            "function": "save_diagnosis",
            "store": self.name,
            "diagnosis_id": record.id,
            "risk_tier": risk_tier,
        })
        return record

    def delete_diagnosis(self, diagnosis_id: int) -> bool:
        with self._session() as db:
            deleted = (
                db.query(Diagnosis)
                .filter(Diagnosis.id == int(diagnosis_id))
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted > 0

    # ---- recommendations ----
    def list_recommendations(self, risk_tier: Optional[str] = None) -> List[Recommendation]:
        with self._session() as db:
            qry = db.query(Recommendation)
            if risk_tier is not None:
                qry = qry.filter(
                    (Recommendation.risk_tier == risk_tier) | (Recommendation.risk_tier.is_(None))
                )
            return qry.order_by(Recommendation.id.asc()).all()

    def create_recommendation(
        self, title: str, description: str, risk_tier: Optional[str] = None
    ) -> Recommendation:
        with self._session() as db:
            rec = Recommendation(title=title, description=description, risk_tier=risk_tier)
            db.add(rec)
            db.commit()
            db.refresh(rec)
            return rec

    def delete_recommendation(self, recommendation_id: int) -> bool:
        with self._session() as db:
            deleted = (
                db.query(Recommendation)
                .filter(Recommendation.id == int(recommendation_id))
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted > 0

    # ---- housekeeping ----
    def stats(self) -> Dict[str, object]:
        with self._session() as db:
            by_tier = empty_tier_counts()
            rows = (
                db.query(Diagnosis.risk_tier, func.count(Diagnosis.id))
                .group_by(Diagnosis.risk_tier)
                .all()
            )
            for tier, count in rows:
                by_tier[tier] = int(count)
            return {
                "total_users": db.query(func.count(User.id)).scalar() or 0,
                "total_diagnoses": db.query(func.count(Diagnosis.id)).scalar() or 0,
                "total_symptoms": db.query(func.count(Symptom.id)).scalar() or 0,
                "total_recommendations": db.query(func.count(Recommendation.id)).scalar() or 0,
                "diagnoses_by_tier": by_tier,
            }

    def ping(self) -> bool:
        try:
            with self._session() as db:
                db.execute(text("SELECT 1"))
            return True
        except DataStoreError:
            return False

    def close(self) -> None:
        self.engine.dispose()
