"""One-sentence summaries of a finished breakdown."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from taskbreakdown.services.plan_types import PlanUnit
from taskbreakdown.services.prompts import build_summary_prompts


@dataclass
class SummaryResult:
    summary: str
    progress: str


def render_breakdown_text(units: Sequence[PlanUnit]) -> str:
    """Render units as ``"<unit>:\\n- task\\n- task\\n"`` blocks separated by blank lines."""
    return "\n".join(f"{unit.unit}:\n- " + "\n- ".join(unit.tasks) + "\n" for unit in units)


def summarize_breakdown(units: Sequence[PlanUnit], llm: Any) -> SummaryResult:
    system_prompt, user_prompt = build_summary_prompts(render_breakdown_text(units))
    summary = llm.complete(system_prompt, user_prompt, structured=False).strip()
    if not summary:
        return SummaryResult(summary="", progress="No summary received from the AI")
    return SummaryResult(summary=summary, progress="Summary generated successfully")
