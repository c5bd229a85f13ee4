"""Generate a plan breakdown, in one call or in sequential batches."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Tuple

from taskbreakdown.core.config import Settings, settings as default_settings
from taskbreakdown.observability.metrics import log_metric
from taskbreakdown.observability.tracing import trace
from taskbreakdown.services.errors import BreakdownParseError, UpstreamModelError
from taskbreakdown.services.json_repair import is_fallback_unit, make_fallback_unit, recover_breakdown
from taskbreakdown.services.plan_types import (
    BreakdownRequest,
    ChunkResult,
    GenerationOutcome,
    GenerationResult,
    PlanUnit,
)
from taskbreakdown.services.prompts import build_breakdown_prompts
from taskbreakdown.services.sizing import PlanSize, compute_plan_size, partition_units

logger = logging.getLogger(__name__)

MODE_SINGLE_SHOT = "single_shot"
MODE_CHUNKED = "chunked"


def generate_breakdown(
    request: BreakdownRequest,
    llm: Any,
    *,
    config: Settings | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> GenerationResult:
    """Size the request, call the model, and repair its output into plan units.

    Raises ``PlanSizeError`` before any model call when the plan is too long,
    ``UpstreamModelError`` when a single-shot call fails, and
    ``BreakdownParseError`` when nothing at all can be recovered from a
    single-shot response. Batch failures in chunked mode are replaced with
    placeholder units instead.
    """
    config = config or default_settings
    size = compute_plan_size(request, max_weeks=config.max_plan_weeks)
    trace_metadata: Dict[str, Any] = {
        "granularity": request.granularity.value,
        "unit_count": size.unit_count,
        "total_weeks": size.total_weeks,
    }

    if size.unit_count <= config.chunk_threshold:
        with trace("breakdown.single_shot", metadata=trace_metadata):
            units = _generate_single_shot(request, size, llm)
        return _apply_unit_policy(units, size, config, mode=MODE_SINGLE_SHOT, batches=1)

    ranges = partition_units(size.unit_count, config.chunk_size)
    trace_metadata["batches"] = len(ranges)
    with trace("breakdown.chunked", metadata=trace_metadata):
        chunks = _generate_chunked(request, size, llm, ranges, delay=config.chunk_delay_seconds, sleep=sleep)
    units = [unit for chunk in chunks for unit in chunk.units]
    failed = sum(1 for chunk in chunks if chunk.fallback)
    if failed:
        logger.warning("%d of %d batch(es) fell back to placeholder units", failed, len(chunks))
    return _apply_unit_policy(units, size, config, mode=MODE_CHUNKED, batches=len(chunks))


def _generate_single_shot(request: BreakdownRequest, size: PlanSize, llm: Any) -> List[PlanUnit]:
    system_prompt, user_prompt = build_breakdown_prompts(request, size)
    try:
        raw = llm.complete(system_prompt, user_prompt)
    except UpstreamModelError:
        logger.exception("Single-shot breakdown call failed")
        raise

    result = recover_breakdown(raw)
    if not result.ok:
        raise BreakdownParseError(
            "The AI response could not be turned into a plan. Please try again."
        )
    logger.info("Single-shot breakdown recovered %d unit(s) via %s", len(result.units), result.stage)
    return list(result.units)


def _generate_chunked(
    request: BreakdownRequest,
    size: PlanSize,
    llm: Any,
    ranges: List[Tuple[int, int]],
    *,
    delay: float,
    sleep: Callable[[float], None],
) -> List[ChunkResult]:
    chunks: List[ChunkResult] = []
    for position, (start, end) in enumerate(ranges):
        if position and delay > 0:
            sleep(delay)
        chunks.append(_generate_chunk(request, size, llm, start, end))
    return chunks


def _generate_chunk(request: BreakdownRequest, size: PlanSize, llm: Any, start: int, end: int) -> ChunkResult:
    system_prompt, user_prompt = build_breakdown_prompts(request, size, unit_range=(start, end))
    try:
        raw = llm.complete(system_prompt, user_prompt)
    except Exception as exc:
        # one failing batch must not abort the remaining ones
        logger.warning("Batch %d-%d failed: %s", start, end, exc)
        log_metric("breakdown.batch.fallback", 1, metadata={"range_start": start, "range_end": end})
        return _fallback_chunk(size, start, end)

    result = recover_breakdown(raw)
    if not result.ok:
        logger.warning("Batch %d-%d yielded no units; using placeholders", start, end)
        log_metric("breakdown.batch.fallback", 1, metadata={"range_start": start, "range_end": end})
        return _fallback_chunk(size, start, end)

    expected = end - start + 1
    if len(result.units) > expected:
        logger.debug("Batch %d-%d returned %d extra unit(s); dropped", start, end, len(result.units) - expected)
    # placeholders from pattern recovery are numbered from 1; renumber them into this batch's range
    units = [
        make_fallback_unit(start + position, size.noun) if is_fallback_unit(unit) else unit
        for position, unit in enumerate(result.units[:expected])
    ]
    for index in range(start + len(units), end + 1):
        units.append(make_fallback_unit(index, size.noun))

    all_fallback = all(is_fallback_unit(unit) for unit in units)
    if all_fallback:
        logger.warning("Batch %d-%d recovered placeholders only", start, end)
        log_metric("breakdown.batch.fallback", 1, metadata={"range_start": start, "range_end": end})
    return ChunkResult(range_start=start, range_end=end, units=units, fallback=all_fallback)


def _fallback_chunk(size: PlanSize, start: int, end: int) -> ChunkResult:
    units = [make_fallback_unit(index, size.noun) for index in range(start, end + 1)]
    return ChunkResult(range_start=start, range_end=end, units=units, fallback=True)


def _apply_unit_policy(
    units: List[PlanUnit],
    size: PlanSize,
    config: Settings,
    *,
    mode: str,
    batches: int,
) -> GenerationResult:
    """Accept, flag or pad a result depending on how many units arrived."""
    expected = size.unit_count
    minimum = min(config.min_accepted_units, expected)
    produced = len(units)
    padded = False

    if produced < minimum:
        logger.warning("Only %d of %d unit(s) generated; padding with placeholders", produced, expected)
        units = units + [make_fallback_unit(index, size.noun) for index in range(produced + 1, expected + 1)]
        padded = True
    elif produced < expected:
        logger.warning("Accepting partial breakdown: %d of %d unit(s)", produced, expected)

    fallback_units = sum(1 for unit in units if is_fallback_unit(unit))
    if padded or fallback_units == len(units):
        outcome = GenerationOutcome.FALLBACK
    elif fallback_units or produced < expected:
        outcome = GenerationOutcome.PARTIAL
    else:
        outcome = GenerationOutcome.SUCCESS

    log_metric(
        "breakdown.units_generated",
        len(units),
        metadata={"expected": expected, "mode": mode, "outcome": outcome.value},
    )
    return GenerationResult(
        units=units,
        expected_unit_count=expected,
        outcome=outcome,
        mode=mode,
        batches=batches,
        fallback_units=fallback_units,
    )
