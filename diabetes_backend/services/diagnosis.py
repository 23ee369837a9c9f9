from __future__ import annotations

import logging
from typing import Dict, List, Optional

from diabetes_backend.models import User
from diabetes_backend.schemas.diagnosis import DiagnosisRequest, DiagnosisResponse, UserSymptomOut
from diabetes_backend.schemas.recommendations import RecommendationOut
from diabetes_backend.services.classifier import RiskClassifier
from diabetes_backend.services.store import DataStore

logger = logging.getLogger("diabetes")


class UnknownUserError(LookupError):
    """The request referenced a user id the store does not know."""


def resolve_user(store: DataStore, payload: DiagnosisRequest) -> Optional[User]:
    """Pick the user a diagnosis belongs to.

    An explicit ``user_id`` must exist. Otherwise the user is found by exact
    name or created from the form fields. Without either the diagnosis is
    stored anonymously.
    """
    if payload.user_id:
        user = store.get_user(payload.user_id)
        if user is None:
            raise UnknownUserError(payload.user_id)
        return user
    if payload.name:
        user = store.find_user_by_name(payload.name)
        if user is not None:
            return user
        user = store.create_user(payload.name, age=payload.age, sex=payload.sex)
        logger.info({"function": "resolve_user", "status": "created", "user_id": user.id})
        return user
    return None


def summarize(tier: str) -> str:
    return f"Based on the symptoms you reported, you have a {tier} risk of diabetes."


def process_diagnosis(
    store: DataStore,
    classifier: RiskClassifier,
    payload: DiagnosisRequest,
) -> DiagnosisResponse:
    """Classify the reported symptoms, append the record and attach advice."""
    user = resolve_user(store, payload)
    result = classifier.classify(payload.symptoms)

    record = store.save_diagnosis(
        user.id if user else None,
        result.risk_tier.value,
        result.score,
        result.symptoms,
        matched_rule=result.matched_rule,
    )
    recommendations = store.list_recommendations(risk_tier=result.risk_tier.value)

    logger.info({
        "function": "process_diagnosis",
        "diagnosis_id": record.id,
        "strategy": classifier.strategy_name,
        "risk_tier": result.risk_tier.value,
        "score": result.score,
        "matched_rule": result.matched_rule,
        "symptom_count": len(result.symptoms),
    })

    return DiagnosisResponse(
        diagnosis_id=record.id,
        user_id=record.user_id,
        risk_tier=result.risk_tier.value,
        score=result.score,
        matched_rule=result.matched_rule,
        recommendation_text=result.recommendation_text,
        summary=summarize(result.risk_tier.value),
        strategy=classifier.strategy_name,
        symptoms=list(result.symptoms),
        recommendations=[RecommendationOut.model_validate(r, from_attributes=True) for r in recommendations],
        created_at=record.created_at,
    )


def list_user_symptoms(store: DataStore, user_id: Optional[str] = None) -> List[UserSymptomOut]:
    """Flatten stored diagnoses into one row per reported symptom code."""
    labels: Dict[str, str] = {s.code: s.label for s in store.list_symptoms()}
    rows: List[UserSymptomOut] = []
    for diagnosis in store.list_diagnoses(user_id=user_id):
        for code in diagnosis.symptom_codes or []:
            rows.append(
                UserSymptomOut(
                    diagnosis_id=diagnosis.id,
                    user_id=diagnosis.user_id,
                    symptom_code=code,
                    label=labels.get(code),
                    created_at=diagnosis.created_at,
                )
            )
    return rows
