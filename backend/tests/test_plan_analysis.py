from __future__ import annotations

import pytest

from taskbreakdown.services.plan_analysis import GENERAL_RESOURCES, analyze_breakdown, suggest_resources
from taskbreakdown.services.plan_types import BreakdownRequest, PlanUnit


def _request(**overrides) -> BreakdownRequest:
    payload = {"goal": "Learn Python programming", "total_effort": 6, "daily_hours_commitment": 2}
    payload.update(overrides)
    return BreakdownRequest(**payload)


def _units(count: int, tasks_per_unit: int = 2) -> list[PlanUnit]:
    return [
        PlanUnit(unit=f"Day {index}", tasks=[f"Coding exercise {task}" for task in range(tasks_per_unit)])
        for index in range(1, count + 1)
    ]


@pytest.mark.parametrize(
    ("skill_level", "expected"),
    [(None, "low"), ("beginner", "medium"), ("intermediate", "low"), ("advanced", "low")],
)
def test_short_plan_complexity(skill_level, expected) -> None:
    analysis = analyze_breakdown(_request(), _units(3), skill_level)

    assert analysis.complexity == expected


def test_long_plan_is_high_complexity_with_risks() -> None:
    request = _request(total_effort=300, daily_hours_commitment=5)

    analysis = analyze_breakdown(request, _units(45), "advanced")

    assert analysis.complexity == "medium"
    assert "Long-term commitment may lead to motivation challenges" in analysis.risk_factors
    assert "High daily commitment may not be sustainable long-term" in analysis.risk_factors
    assert analysis.time_optimization_opportunities[0] == (
        "Consider increasing daily commitment from 5 to 6 hours to reduce plan duration"
    )
    assert "Consider quarterly goal reviews and plan adjustments" in analysis.recommendations


def test_resource_requirements_follow_task_content() -> None:
    analysis = analyze_breakdown(_request(), _units(2))

    assert "Development environment and code editor" in analysis.resource_requirements


def test_suggest_resources_matches_goal_keywords() -> None:
    resources = suggest_resources("Learn Python programming")

    assert resources[0] == "FreeCodeCamp for interactive coding practice"
    assert resources[-len(GENERAL_RESOURCES):] == GENERAL_RESOURCES


def test_suggest_resources_always_includes_general() -> None:
    assert suggest_resources("Bake sourdough") == GENERAL_RESOURCES
