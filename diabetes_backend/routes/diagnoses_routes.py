from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from diabetes_backend.auth.deps import require_admin
from diabetes_backend.db.deps import get_store
from diabetes_backend.schemas.diagnosis import DiagnosisOut, UserSymptomOut
from diabetes_backend.services.diagnosis import list_user_symptoms
from diabetes_backend.services.store import DataStore

router = APIRouter(prefix="/api/diagnoses", tags=["diagnoses"])
user_symptoms_router = APIRouter(prefix="/api/user-symptoms", tags=["diagnoses"])


@router.get("", response_model=List[DiagnosisOut])
def list_diagnoses(user_id: Optional[str] = None, store: DataStore = Depends(get_store)):
    return store.list_diagnoses(user_id=user_id)


@router.get("/{diagnosis_id}", response_model=DiagnosisOut)
def get_diagnosis(diagnosis_id: int, store: DataStore = Depends(get_store)):
    diagnosis = store.get_diagnosis(diagnosis_id)
    if not diagnosis:
        raise HTTPException(status_code=404, detail="Diagnosis not found")
    return diagnosis


@router.delete("/{diagnosis_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_diagnosis(
    diagnosis_id: int,
    store: DataStore = Depends(get_store),
    _admin: dict = Depends(require_admin),
):
    if not store.delete_diagnosis(diagnosis_id):
        raise HTTPException(status_code=404, detail="Diagnosis not found")
    return None


@user_symptoms_router.get("", response_model=List[UserSymptomOut])
def user_symptoms(user_id: Optional[str] = None, store: DataStore = Depends(get_store)):
    return list_user_symptoms(store, user_id=user_id)
