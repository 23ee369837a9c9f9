from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from diabetes_backend.auth.deps import require_admin
from diabetes_backend.db.deps import get_store
from diabetes_backend.schemas.recommendations import RecommendationCreate, RecommendationOut, RiskTierName
from diabetes_backend.services.store import DataStore

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


@router.get("", response_model=List[RecommendationOut])
def list_recommendations(risk_tier: Optional[RiskTierName] = None, store: DataStore = Depends(get_store)):
    """All advice, or the advice shown for one tier (tier-less entries included)."""
    return store.list_recommendations(risk_tier=risk_tier)


@router.post("", response_model=RecommendationOut, status_code=status.HTTP_201_CREATED)
def create_recommendation(
    payload: RecommendationCreate,
    store: DataStore = Depends(get_store),
    _admin: dict = Depends(require_admin),
):
    return store.create_recommendation(payload.title, payload.description, payload.risk_tier)


@router.delete("/{recommendation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recommendation(
    recommendation_id: int,
    store: DataStore = Depends(get_store),
    _admin: dict = Depends(require_admin),
):
    if not store.delete_recommendation(recommendation_id):
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return None
