"""Schemas for breakdown generation, summary, analysis and export endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from taskbreakdown.services.plan_types import BreakdownRequest, GenerationOutcome, PlanUnit


class BreakdownResponse(BaseModel):
    breakdown: List[PlanUnit]
    unit_count: int
    expected_unit_count: int
    outcome: GenerationOutcome
    mode: str
    fallback_units: int
    request_id: str


class BreakdownPayload(BaseModel):
    breakdown: List[PlanUnit] = Field(..., min_length=1)


class SummaryResponse(BaseModel):
    summary: str
    progress: str


class AnalysisRequest(BaseModel):
    request: BreakdownRequest
    breakdown: List[PlanUnit] = Field(..., min_length=1)
    skill_level: Optional[Literal["beginner", "intermediate", "advanced"]] = None


class AnalysisResponse(BaseModel):
    complexity: Literal["low", "medium", "high"]
    time_optimization_opportunities: List[str]
    resource_requirements: List[str]
    risk_factors: List[str]
    recommendations: List[str]
    suggested_resources: List[str]
