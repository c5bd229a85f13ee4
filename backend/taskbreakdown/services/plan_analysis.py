"""Heuristic analysis of a generated plan.

Nothing here calls the model: complexity, risks and recommendations are
derived from the plan's shape and the request's commitment.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from taskbreakdown.services.plan_types import BreakdownRequest, EffortUnit, PlanUnit

COMPLEXITY_LEVELS = ("low", "medium", "high")

RESOURCE_KEYWORDS = {
    ("programming", "coding", "development"): [
        "Development environment and code editor",
        "Practice projects and coding exercises",
    ],
    ("design", "ui", "ux"): [
        "Design tools (Figma, Adobe Creative Suite)",
        "Design inspiration and reference materials",
    ],
    ("language", "speaking", "communication"): [
        "Language learning apps or courses",
        "Practice conversation partners",
    ],
}

SUGGESTED_RESOURCES = {
    ("programming", "coding", "development"): [
        "FreeCodeCamp for interactive coding practice",
        "GitHub for version control and portfolio projects",
        "Stack Overflow for problem-solving",
    ],
    ("design", "ui", "ux"): [
        "Figma for design prototyping",
        "Dribbble for design inspiration",
        "Adobe Creative Suite for professional tools",
    ],
    ("business", "entrepreneurship", "startup"): [
        "Y Combinator Startup School for business fundamentals",
        "Lean Canvas for business model planning",
        "Google Analytics for market research",
    ],
    ("language", "speaking", "communication"): [
        "Duolingo for vocabulary building",
        "iTalki for conversation practice",
        "Anki for spaced repetition learning",
    ],
}

GENERAL_RESOURCES = [
    "YouTube for tutorial videos",
    "Notion for organizing learning materials",
    "Pomodoro timer for focused study sessions",
]


@dataclass
class PlanAnalysis:
    complexity: str
    time_optimization_opportunities: List[str] = field(default_factory=list)
    resource_requirements: List[str] = field(default_factory=list)
    risk_factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


def analyze_breakdown(
    request: BreakdownRequest,
    units: Sequence[PlanUnit],
    skill_level: Optional[str] = None,
) -> PlanAnalysis:
    total_periods = len(units)
    total_tasks = sum(len(unit.tasks) for unit in units)
    average_tasks = total_tasks / total_periods if total_periods else 0.0

    base = _base_complexity(total_periods, average_tasks)
    complexity = _adjust_for_skill(base, skill_level)

    opportunities: List[str] = []
    if total_periods > 26:
        commitment = request.daily_hours_commitment
        opportunities.append(
            f"Consider increasing daily commitment from {commitment:g} to {commitment + 1:g} hours "
            "to reduce plan duration"
        )
    if average_tasks > 20:
        opportunities.append("Some periods have high task density - consider redistributing tasks for better balance")
    if request.effort_unit == EffortUnit.MONTHS and request.total_effort > 6:
        opportunities.append("Long-term goals benefit from quarterly milestones and progress reviews")

    content = " ".join(task for unit in units for task in unit.tasks).lower()
    requirements = _match_keywords(content, RESOURCE_KEYWORDS)

    risks: List[str] = []
    if total_periods > 40:
        risks.append("Long-term commitment may lead to motivation challenges")
    if request.daily_hours_commitment > 4:
        risks.append("High daily commitment may not be sustainable long-term")
    if average_tasks > 25:
        risks.append("High task density may cause overwhelm")

    return PlanAnalysis(
        complexity=complexity,
        time_optimization_opportunities=opportunities,
        resource_requirements=requirements,
        risk_factors=risks,
        recommendations=_recommendations(request, total_periods, complexity, skill_level),
    )


def suggest_resources(goal: str) -> List[str]:
    """Keyword-matched learning resources, always ending with general ones."""
    return _match_keywords(goal.lower(), SUGGESTED_RESOURCES) + list(GENERAL_RESOURCES)


def _base_complexity(total_periods: int, average_tasks: float) -> str:
    if total_periods <= 4 and average_tasks <= 15:
        return "low"
    if total_periods > 26 or average_tasks > 25:
        return "high"
    return "medium"


def _adjust_for_skill(base: str, skill_level: Optional[str]) -> str:
    position = COMPLEXITY_LEVELS.index(base)
    if skill_level == "beginner":
        position += 1
    elif skill_level == "advanced":
        position -= 1
    return COMPLEXITY_LEVELS[max(0, min(position, len(COMPLEXITY_LEVELS) - 1))]


def _match_keywords(content: str, table) -> List[str]:
    matched: List[str] = []
    for keywords, items in table.items():
        if any(keyword in content for keyword in keywords):
            matched.extend(items)
    return matched


def _recommendations(
    request: BreakdownRequest,
    total_periods: int,
    complexity: str,
    skill_level: Optional[str],
) -> List[str]:
    recommendations: List[str] = []
    if skill_level == "beginner":
        recommendations.append("Start with shorter daily sessions to build consistency")
        recommendations.append("Focus on understanding fundamentals before moving to advanced topics")
    elif skill_level == "advanced":
        recommendations.append("Consider taking on challenging projects to accelerate learning")
        recommendations.append("Look for opportunities to teach or mentor others in this area")

    if complexity == "high":
        recommendations.append("Break down complex periods into smaller, manageable goals")
        recommendations.append("Schedule regular progress reviews to stay on track")
        recommendations.append("Prepare for challenges by building in buffer time")

    if total_periods > 26:
        recommendations.append("Consider quarterly goal reviews and plan adjustments")
        recommendations.append("Build in motivation strategies for long-term commitment")
    elif total_periods < 4:
        recommendations.append("Make the most of your intensive timeline with daily progress tracking")

    if request.daily_hours_commitment >= 3:
        recommendations.append("Schedule regular breaks to prevent burnout")
        recommendations.append("Consider alternating between intensive and lighter days")
    return recommendations
