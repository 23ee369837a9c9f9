# diabetes_backend/schemas/symptoms.py
from typing import Optional

from pydantic import BaseModel, Field


class SymptomCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=16, description="Short identifier, e.g. 'G01'.")
    label: str = Field(..., min_length=1, max_length=255, description="Human-readable symptom name.")
    weight: int = Field(1, ge=1, description="Descriptive weight; not used for scoring.")


class SymptomUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=255)
    weight: Optional[int] = Field(None, ge=1)


class SymptomOut(BaseModel):
    id: int
    code: str
    label: str
    weight: int

    class Config:
        from_attributes = True
