# diabetes_backend/schemas/diagnosis.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from diabetes_backend.schemas.recommendations import RecommendationOut, RiskTierName


def normalize_symptom_codes(value: Any) -> List[str]:
    """Coerce the loosely-shaped symptom field into an ordered list of codes.

    Accepts strings, integers and objects carrying a ``code`` key. Anything
    else (including a non-list value) is dropped, so absent or malformed
    input ends up as an empty list. Order and duplicates are kept.
    """
    if not isinstance(value, (list, tuple)):
        return []
    codes: List[str] = []
    for item in value:
        if isinstance(item, bool):
            continue
        if isinstance(item, dict):
            item = item.get("code", item.get("kode"))
        if isinstance(item, int):
            item = str(item)
        if isinstance(item, str) and item.strip():
            codes.append(item.strip())
    return codes


class DiagnosisRequest(BaseModel):
    """Body of the diagnosis endpoints; accepts the legacy form field names too."""

    symptoms: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("symptoms", "gejala", "symptom_codes"),
        description="Observed symptom codes, in the order the user selected them.",
    )
    user_id: Optional[str] = Field(None, description="Existing user to attach the diagnosis to.")
    name: Optional[str] = Field(
        None, max_length=120, validation_alias=AliasChoices("name", "nama_lengkap")
    )
    age: Optional[int] = Field(None, ge=0, le=130, validation_alias=AliasChoices("age", "usia"))
    sex: Optional[str] = Field(
        None, max_length=16, validation_alias=AliasChoices("sex", "jenis_kelamin")
    )

    @field_validator("symptoms", mode="before")
    @classmethod
    def _normalize_symptoms(cls, value: Any) -> List[str]:
        return normalize_symptom_codes(value)

    @field_validator("name", "sex", "user_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class DiagnosisOut(BaseModel):
    id: int
    user_id: Optional[str] = None
    risk_tier: RiskTierName
    score: float
    matched_rule: Optional[str] = None
    symptom_codes: List[str]
    created_at: datetime

    class Config:
        from_attributes = True


class DiagnosisResponse(BaseModel):
    diagnosis_id: int
    user_id: Optional[str] = None
    risk_tier: RiskTierName
    score: float
    matched_rule: Optional[str] = None
    recommendation_text: str
    summary: str
    strategy: str
    symptoms: List[str]
    recommendations: List[RecommendationOut]
    created_at: datetime


class UserSymptomOut(BaseModel):
    diagnosis_id: int
    user_id: Optional[str] = None
    symptom_code: str
    label: Optional[str] = None
    created_at: datetime
