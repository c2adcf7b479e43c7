from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CompatibilityResultSchema(BaseModel):
    viewer_id: str | None
    candidate_id: str | None
    score: int = Field(..., ge=0, le=100)
    band: str
    contributions: dict[str, float]


class CandidateSchema(BaseModel):
    id: str
    owner_id: str
    created_at: datetime
    has_preferences: bool


class MatchItem(BaseModel):
    candidate: CandidateSchema
    compatibility: CompatibilityResultSchema


class MatchPageResponse(BaseModel):
    status: str = "ok"
    items: list[MatchItem]
    page: int
    size: int
    total_count: int
    total_pages: int
    min_score: int
    viewer_has_preferences: bool = Field(
        False, description="False when the viewer has not taken the questionnaire yet"
    )


class FactorAverageSchema(BaseModel):
    factor_id: str
    average_contribution_percent: float


class MatchDistributionResponse(BaseModel):
    status: str = "ok"
    total_count: int
    average_score: int
    band_counts: dict[str, int]
    top_factors: list[FactorAverageSchema]
    min_score: int | None = None
