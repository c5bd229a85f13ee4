"""Recover a plan breakdown from malformed model output.

The model is asked for ``{"breakdown": [{"unit": ..., "tasks": [...]}, ...]}``
but regularly wraps it in prose, emits typographic quotes, or stops mid-way
through a task list. Recovery is an ordered chain of stages, each a plain
``text -> StageResult`` function; the first stage that yields units wins:

1. ``parse_strict``: the text is already a valid breakdown document.
2. ``parse_normalized``: clean the text (quotes, fences, whitespace, trailing
   commas, surrounding prose) and parse again.
3. ``parse_repaired``: close a truncated document at its last complete task
   list or unit object.
4. ``extract_by_pattern``: give up on JSON and pull unit records out with
   regular expressions, falling back to placeholder units.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from taskbreakdown.services.plan_types import Breakdown, PlanUnit

logger = logging.getLogger(__name__)

FALLBACK_MARKER = "Content could not be recovered"
MAX_SYNTHESIZED_UNITS = 12

SMART_QUOTES = {
    "“": '"',
    "”": '"',
    "„": '"',
    "‟": '"',
    "″": '"',
    "‘": "'",
    "’": "'",
    "‚": "'",
    "‛": "'",
    "′": "'",
}
_SMART_QUOTE_RE = re.compile("|".join(SMART_QUOTES))
_CODE_FENCE_RE = re.compile(r"```[a-zA-Z]*")
_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")

_STRING = r'"(?:[^"\\]|\\.)*"'
_UNIT_FRAGMENT_RE = re.compile(
    r'\{\s*"unit"\s*:\s*' + _STRING + r'[^{}\[\]]*?"tasks"\s*:\s*\[[^\]]*\][^{}\[\]]*\}'
)
_UNIT_LABEL_RE = re.compile(r'"unit"\s*:\s*(' + _STRING + ")")
_TASK_LIST_RE = re.compile(r'"tasks"\s*:\s*\[([^\]]*)\]')
_STRING_LITERAL_RE = re.compile(_STRING)
_PERIOD_MENTION_RE = re.compile(r"\b(Week|Day)\s+(\d+)", re.IGNORECASE)


@dataclass
class StageResult:
    """Outcome of one recovery stage."""

    stage: str
    units: Optional[List[PlanUnit]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.units)


RepairStage = Callable[[str], StageResult]


def make_fallback_unit(index: int, noun: str = "Week") -> PlanUnit:
    """Placeholder used wherever a unit could not be generated or recovered."""
    return PlanUnit(
        unit=f"{noun} {index} (fallback)",
        tasks=[f"{FALLBACK_MARKER} for this period. Review your goal and plan this {noun.lower()} manually."],
    )


def is_fallback_unit(unit: PlanUnit) -> bool:
    return any(FALLBACK_MARKER in task for task in unit.tasks)


def clean_json_text(text: str) -> str:
    """Quote, fence, whitespace and trailing-comma cleanup without trimming."""
    cleaned = _SMART_QUOTE_RE.sub(lambda match: SMART_QUOTES[match.group(0)], text)
    cleaned = _CODE_FENCE_RE.sub(" ", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    cleaned = _TRAILING_COMMA_RE.sub(r"\1", cleaned)
    return cleaned.strip()


def normalize_json_text(text: str) -> str:
    """Return the cleaned text between the first ``{`` and the last ``}``.

    Text without a brace pair is returned unchanged.
    """
    cleaned = clean_json_text(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        return text
    return cleaned[start : end + 1]


def repair_truncated_json(text: str) -> Optional[str]:
    """Close a document that stops part-way through the breakdown array.

    Returns ``None`` when the text does not look truncated or has nothing to
    cut back to.
    """
    cleaned = clean_json_text(text)
    start = cleaned.find("{")
    if start == -1:
        return None
    candidate = cleaned[start:].rstrip()
    if candidate.endswith("}"):
        return None

    array_close = candidate.rfind('"]')
    object_close = candidate.rfind("}")
    if array_close == -1 and object_close == -1:
        return None
    if array_close > object_close:
        # close the task list's unit object, the breakdown array and the document
        return candidate[: array_close + 2] + "}]}"
    return candidate[: object_close + 1] + "]}"


def _parse_document(text: str) -> List[PlanUnit]:
    return Breakdown.model_validate_json(text).breakdown


def parse_strict(text: str) -> StageResult:
    try:
        return StageResult("strict", units=_parse_document(text))
    except ValidationError as exc:
        return StageResult("strict", error=f"{exc.error_count()} validation error(s)")


def parse_normalized(text: str) -> StageResult:
    try:
        return StageResult("normalized", units=_parse_document(normalize_json_text(text)))
    except ValidationError as exc:
        return StageResult("normalized", error=f"{exc.error_count()} validation error(s)")


def parse_repaired(text: str) -> StageResult:
    repaired = repair_truncated_json(text)
    if repaired is None:
        return StageResult("repaired", error="text is not a truncated document")
    try:
        return StageResult("repaired", units=_parse_document(repaired))
    except ValidationError as exc:
        return StageResult("repaired", error=f"{exc.error_count()} validation error(s) after repair")


def _detect_noun(text: str) -> str:
    match = _PERIOD_MENTION_RE.search(text)
    return match.group(1).capitalize() if match else "Week"


def _decode_literal(literal: str) -> str:
    try:
        return json.loads(literal)
    except json.JSONDecodeError:
        return literal[1:-1]


def _parse_task_list(inner: str) -> List[str]:
    try:
        values = json.loads(f"[{inner}]")
    except json.JSONDecodeError:
        values = [_decode_literal(literal) for literal in _STRING_LITERAL_RE.findall(inner)]
    if not isinstance(values, list):
        return []
    return [str(value).strip() for value in values if str(value).strip()]


def _extract_fragments(text: str, noun: str) -> List[PlanUnit]:
    units: List[PlanUnit] = []
    for index, match in enumerate(_UNIT_FRAGMENT_RE.finditer(text), start=1):
        try:
            units.append(PlanUnit.model_validate_json(match.group(0)))
        except ValidationError:
            logger.debug("Unit fragment %s did not parse; substituting fallback", index)
            units.append(make_fallback_unit(index, noun))
    return units


def _pair_labels_with_tasks(text: str, noun: str) -> List[PlanUnit]:
    labels = [_decode_literal(literal) for literal in _UNIT_LABEL_RE.findall(text)]
    task_lists = [_parse_task_list(inner) for inner in _TASK_LIST_RE.findall(text)]
    units: List[PlanUnit] = []
    for index, (label, tasks) in enumerate(zip(labels, task_lists), start=1):
        if not label.strip():
            label = f"{noun} {index}"
        if not tasks:
            tasks = make_fallback_unit(index, noun).tasks
        units.append(PlanUnit(unit=label.strip(), tasks=tasks))
    return units


def _synthesize_from_mentions(text: str, noun: str) -> List[PlanUnit]:
    numbers = [int(match.group(2)) for match in _PERIOD_MENTION_RE.finditer(text)]
    if not numbers:
        return []
    count = min(max(numbers), MAX_SYNTHESIZED_UNITS)
    return [make_fallback_unit(index, noun) for index in range(1, count + 1)]


def extract_by_pattern(text: str) -> StageResult:
    """Salvage unit records from text that is not valid JSON at all."""
    cleaned = clean_json_text(text)
    noun = _detect_noun(cleaned)

    units = _extract_fragments(cleaned, noun)
    if units:
        return StageResult("pattern:fragments", units=units)

    units = _pair_labels_with_tasks(cleaned, noun)
    if units:
        return StageResult("pattern:paired", units=units)

    units = _synthesize_from_mentions(cleaned, noun)
    if units:
        return StageResult("pattern:synthesized", units=units)

    return StageResult("pattern", error=f"no {noun.lower()} records or mentions found")


REPAIR_CHAIN: Sequence[RepairStage] = (parse_strict, parse_normalized, parse_repaired, extract_by_pattern)


def recover_breakdown(text: str, chain: Sequence[RepairStage] = REPAIR_CHAIN) -> StageResult:
    """Run ``text`` through each stage in order and return the first success."""
    errors: List[str] = []
    for stage in chain:
        result = stage(text)
        if result.ok:
            if errors:
                logger.info("Recovered %d unit(s) via %s after: %s", len(result.units), result.stage, "; ".join(errors))
            return result
        errors.append(f"{result.stage}: {result.error}")
    logger.warning("Breakdown recovery exhausted: %s", "; ".join(errors))
    return StageResult("exhausted", error="; ".join(errors))
