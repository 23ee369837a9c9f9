# diabetes_backend/routes/symptoms_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from diabetes_backend.auth.deps import require_admin
from diabetes_backend.db.deps import get_store
from diabetes_backend.schemas.symptoms import SymptomCreate, SymptomOut, SymptomUpdate
from diabetes_backend.services.store import DataStore

router = APIRouter(prefix="/api/symptoms", tags=["symptoms"])
legacy_router = APIRouter(tags=["symptoms"])
logger = logging.getLogger("diabetes")


@router.get("", response_model=List[SymptomOut])
def list_symptoms(store: DataStore = Depends(get_store)):
    return store.list_symptoms()


@router.get("/{code}", response_model=SymptomOut)
def get_symptom(code: str, store: DataStore = Depends(get_store)):
    symptom = store.get_symptom(code)
    if not symptom:
        raise HTTPException(status_code=404, detail="Symptom not found")
    return symptom


@router.post("", response_model=SymptomOut, status_code=status.HTTP_201_CREATED)
def create_symptom(
    payload: SymptomCreate,
    store: DataStore = Depends(get_store),
    admin: dict = Depends(require_admin),
):
    # DuplicateRecordError is turned into 409 by the app's exception handler
    symptom = store.create_symptom(payload.code.strip(), payload.label, payload.weight)
    logger.info({"function": "create_symptom", "code": symptom.code, "admin": admin.get("sub")})
    return symptom


@router.put("/{code}", response_model=SymptomOut)
def update_symptom(
    code: str,
    payload: SymptomUpdate,
    store: DataStore = Depends(get_store),
    _admin: dict = Depends(require_admin),
):
    symptom = store.update_symptom(code, label=payload.label, weight=payload.weight)
    if not symptom:
        raise HTTPException(status_code=404, detail="Symptom not found")
    return symptom


@router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT)
def delete_symptom(
    code: str,
    store: DataStore = Depends(get_store),
    _admin: dict = Depends(require_admin),
):
    if not store.delete_symptom(code):
        raise HTTPException(status_code=404, detail="Symptom not found")
    return None


@legacy_router.get("/gejala")
def list_symptoms_legacy(store: DataStore = Depends(get_store)):
    """Symptom list in the `{success, data}` envelope the diagnosis form expects."""
    data = [SymptomOut.model_validate(s, from_attributes=True).model_dump() for s in store.list_symptoms()]
    return {"success": True, "data": data}
