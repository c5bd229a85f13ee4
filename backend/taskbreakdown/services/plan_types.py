"""Core value types shared by the breakdown pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class EffortUnit(str, Enum):
    HOURS = "hours"
    DAYS = "days"
    MONTHS = "months"


class Granularity(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class BreakdownRequest(BaseModel):
    """Validated goal plus constraints; frozen once it enters the pipeline."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    goal: str = Field(..., min_length=3, max_length=500, description="The task or goal to achieve.")
    total_effort: float = Field(..., gt=0, le=365, description="Total effort, in effort_unit.")
    effort_unit: EffortUnit = EffortUnit.HOURS
    daily_hours_commitment: float = Field(..., ge=1, le=24, description="Hours available per day.")
    granularity: Granularity = Granularity.DAILY


class PlanUnit(BaseModel):
    """One labeled period (day or week) and the tasks planned for it."""

    unit: str = Field(..., min_length=1, description='Period label, e.g. "Week 3".')
    tasks: List[str] = Field(..., min_length=1, description="Ordered sub-tasks for the period.")


class Breakdown(BaseModel):
    """The document shape the model is asked to return."""

    breakdown: List[PlanUnit]


class GenerationOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial_success"
    FALLBACK = "fallback"


@dataclass
class ChunkResult:
    range_start: int
    range_end: int
    units: List[PlanUnit] = field(default_factory=list)
    fallback: bool = False


@dataclass
class GenerationResult:
    units: List[PlanUnit]
    expected_unit_count: int
    outcome: GenerationOutcome
    mode: str
    batches: int = 1
    fallback_units: int = 0
