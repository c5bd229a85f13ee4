"""Plan sizing: how many units a request needs and how to label them."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from taskbreakdown.services.errors import PlanSizeError
from taskbreakdown.services.plan_types import BreakdownRequest, EffortUnit, Granularity

DAYS_PER_MONTH = 30
DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class PlanSize:
    total_hours: float
    unit_count: int
    total_weeks: int
    granularity: Granularity
    hours_per_unit: float

    @property
    def noun(self) -> str:
        return "Day" if self.granularity == Granularity.DAILY else "Week"

    def label(self, index: int) -> str:
        return f"{self.noun} {index} ({format_hours(self.hours_per_unit)} hours focus)"


def format_hours(value: float) -> str:
    """Render 2.0 as "2" and 1.5 as "1.5"."""
    return f"{value:g}"


def total_hours(request: BreakdownRequest) -> float:
    daily = request.daily_hours_commitment
    if request.effort_unit == EffortUnit.DAYS:
        return request.total_effort * daily
    if request.effort_unit == EffortUnit.MONTHS:
        return request.total_effort * DAYS_PER_MONTH * daily
    return request.total_effort


def _ceil(value: float) -> int:
    # Rounding first keeps 0.1 * 3 style float noise from adding a unit.
    return max(1, math.ceil(round(value, 6)))


def compute_plan_size(request: BreakdownRequest, *, max_weeks: int = 52) -> PlanSize:
    """Size a request, rejecting plans longer than ``max_weeks``."""
    hours = total_hours(request)
    daily = request.daily_hours_commitment
    weekly_hours = daily * DAYS_PER_WEEK
    total_weeks = _ceil(hours / weekly_hours)

    if total_weeks > max_weeks:
        raise PlanSizeError(
            f"This plan would span {total_weeks} weeks, more than the {max_weeks}-week maximum. "
            "Try increasing your daily hours commitment or reducing the total effort."
        )

    if request.granularity == Granularity.DAILY:
        unit_count = _ceil(hours / daily)
        hours_per_unit = daily
    else:
        unit_count = total_weeks
        hours_per_unit = weekly_hours

    return PlanSize(
        total_hours=hours,
        unit_count=unit_count,
        total_weeks=total_weeks,
        granularity=request.granularity,
        hours_per_unit=hours_per_unit,
    )


def partition_units(unit_count: int, batch_size: int) -> List[Tuple[int, int]]:
    """Split ``1..unit_count`` into consecutive inclusive ranges of ``batch_size``."""
    if batch_size < 1:
        raise ValueError("batch_size must be positive")
    return [
        (start, min(start + batch_size - 1, unit_count))
        for start in range(1, unit_count + 1, batch_size)
    ]
