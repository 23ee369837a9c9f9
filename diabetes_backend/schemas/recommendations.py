from typing import Literal, Optional

from pydantic import BaseModel, Field

RiskTierName = Literal["Low", "Medium", "High"]


class RecommendationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    risk_tier: Optional[RiskTierName] = Field(None, description="Leave empty to apply to every tier.")


class RecommendationOut(BaseModel):
    id: int
    title: str
    description: str
    risk_tier: Optional[str] = None

    class Config:
        from_attributes = True
