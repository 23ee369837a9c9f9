from typing import Dict

from pydantic import BaseModel


class StatsOut(BaseModel):
    total_users: int
    total_diagnoses: int
    total_symptoms: int
    total_recommendations: int
    diagnoses_by_tier: Dict[str, int]
