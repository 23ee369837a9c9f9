# diabetes_backend/routes/diagnosis_routes.py
from fastapi import APIRouter, Depends, HTTPException, Request, status

from diabetes_backend.db.deps import get_classifier, get_store
from diabetes_backend.ratelimit import diagnosis_limit, limiter
from diabetes_backend.schemas.diagnosis import DiagnosisRequest, DiagnosisResponse
from diabetes_backend.services.classifier import RiskClassifier
from diabetes_backend.services.diagnosis import UnknownUserError, process_diagnosis
from diabetes_backend.services.store import DataStore

router = APIRouter(tags=["diagnosis"])


def _run(payload: DiagnosisRequest, store: DataStore, classifier: RiskClassifier) -> DiagnosisResponse:
    try:
        return process_diagnosis(store, classifier, payload)
    except UnknownUserError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.post("/api/diagnosis/process", response_model=DiagnosisResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(diagnosis_limit)
def process(
    request: Request,
    payload: DiagnosisRequest,
    store: DataStore = Depends(get_store),
    classifier: RiskClassifier = Depends(get_classifier),
):
    """Classify the reported symptoms and persist the diagnosis."""
    return _run(payload, store, classifier)


@router.post("/diagnosa", response_model=DiagnosisResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(diagnosis_limit)
def process_legacy(
    request: Request,
    payload: DiagnosisRequest,
    store: DataStore = Depends(get_store),
    classifier: RiskClassifier = Depends(get_classifier),
):
    """Form endpoint used by the legacy diagnosis page."""
    return _run(payload, store, classifier)


@router.get("/api/diagnosis/rules")
def describe_rules(classifier: RiskClassifier = Depends(get_classifier)):
    return {
        **classifier.strategy.describe(),
        "recommendation_text": classifier.recommendation_text,
    }
