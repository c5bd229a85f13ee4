"""Prompt templates for breakdown generation and summaries."""
from __future__ import annotations

from typing import Optional, Tuple

from taskbreakdown.services.plan_types import BreakdownRequest
from taskbreakdown.services.sizing import PlanSize, format_hours

BREAKDOWN_SYSTEM_PROMPT = (
    "You are an expert project manager. Your job is to break down a large goal into smaller, "
    "achievable units according to a planning granularity.\n"
    "Respond with JSON only, no commentary and no Markdown. The JSON must have exactly this shape:\n"
    '{"breakdown": [{"unit": "<period label>", "tasks": ["<task>", "<task>"]}]}\n'
    "Every unit needs at least one concrete, actionable task. Units must be in chronological order."
)

SUMMARY_SYSTEM_PROMPT = "Summarize the following task breakdown in one short sentence."


def build_breakdown_prompts(
    request: BreakdownRequest,
    size: PlanSize,
    unit_range: Optional[Tuple[int, int]] = None,
) -> Tuple[str, str]:
    """Return the (system, user) prompt pair for a whole plan or one batch of it."""
    noun = size.noun
    start, end = unit_range or (1, size.unit_count)
    count = end - start + 1

    lines = [
        f"Goal: {request.goal}",
        f"Total effort: {format_hours(request.total_effort)} {request.effort_unit.value} "
        f"({format_hours(size.total_hours)} hours in total).",
        f"Daily commitment: {format_hours(request.daily_hours_commitment)} hours per day.",
        f"Granularity: {request.granularity.value}.",
        f"The full plan has exactly {size.unit_count} {noun.lower()} units.",
    ]
    if unit_range is not None:
        lines.append(
            f"Produce ONLY {noun.lower()}s {start} to {end} ({count} units) of that plan. "
            f"Assume {noun.lower()}s before {start} are already planned and continue from there."
        )
    else:
        lines.append(f"Produce all {count} units.")
    lines.extend(
        [
            f'Label each unit exactly "{noun} N ({format_hours(size.hours_per_unit)} hours focus)", '
            f'for example "{size.label(start)}".',
            f"Plan roughly {format_hours(size.hours_per_unit)} hours of work per unit, split into 2-5 tasks.",
            "Progress from fundamentals to more advanced work so the last unit completes the goal.",
        ]
    )
    return BREAKDOWN_SYSTEM_PROMPT, "\n".join(lines)


def build_summary_prompts(breakdown_text: str) -> Tuple[str, str]:
    return SUMMARY_SYSTEM_PROMPT, breakdown_text
