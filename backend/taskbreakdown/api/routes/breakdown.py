"""Breakdown generation, summary, analysis and export endpoints."""
from __future__ import annotations

from typing import Any, Dict, Literal

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status

from taskbreakdown.api.deps import get_analytics_service, get_attempt_log, get_llm_client
from taskbreakdown.api.schemas.breakdown import (
    AnalysisRequest,
    AnalysisResponse,
    BreakdownPayload,
    BreakdownResponse,
    SummaryResponse,
)
from taskbreakdown.observability.metrics import measured
from taskbreakdown.observability.tracing import trace
from taskbreakdown.services.analytics.base import AnalyticsService, EventType
from taskbreakdown.services.attempt_log import AttemptLog
from taskbreakdown.services.breakdown_generator import generate_breakdown
from taskbreakdown.services.errors import (
    BreakdownError,
    LLMConfigurationError,
    PlanSizeError,
    UpstreamModelError,
)
from taskbreakdown.services.export import PDF_FILENAME, TEXT_FILENAME, export_pdf, export_text
from taskbreakdown.services.plan_analysis import analyze_breakdown, suggest_resources
from taskbreakdown.services.plan_types import BreakdownRequest
from taskbreakdown.services.summary import summarize_breakdown

router = APIRouter(prefix="/api/breakdown", tags=["breakdown"])


@router.post("", response_model=BreakdownResponse)
def create_breakdown_endpoint(
    payload: BreakdownRequest,
    http_request: Request,
    background_tasks: BackgroundTasks,
    llm=Depends(get_llm_client),
    analytics: AnalyticsService = Depends(get_analytics_service),
    attempt_log: AttemptLog = Depends(get_attempt_log),
) -> BreakdownResponse:
    """Break a goal down into daily or weekly units of tasks."""
    request_id = getattr(http_request.state, "request_id", None)
    request_details = payload.model_dump(mode="json")
    attempt_log.log_user_action("Task Breakdown Request", request_details)

    base_metadata: Dict[str, Any] = {
        "route": "/api/breakdown",
        "granularity": payload.granularity.value,
        "effort_unit": payload.effort_unit.value,
        "goal_length": len(payload.goal),
    }

    with measured("breakdown.request", metadata=base_metadata) as metric_metadata:
        try:
            with trace("breakdown.request", metadata=base_metadata, request_id=request_id):
                result = generate_breakdown(payload, llm)
        except PlanSizeError as exc:
            attempt_log.log_user_action("Task Breakdown Rejected", {**request_details, "reason": str(exc)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except LLMConfigurationError as exc:
            attempt_log.log_error(exc, "Task Breakdown")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="The AI service is not configured",
            ) from exc
        except BreakdownError as exc:
            attempt_log.log_error(exc, "Task Breakdown")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to generate task breakdown: {exc}",
            ) from exc
        except Exception as exc:
            attempt_log.log_error(exc, "Task Breakdown")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Unexpected error while generating task breakdown",
            ) from exc
        metric_metadata["units"] = len(result.units)
        metric_metadata["outcome"] = result.outcome.value

    attempt_log.log_model_response("Task Breakdown", {"breakdown": [unit.model_dump() for unit in result.units]})
    attempt_log.log_user_action(
        "Task Breakdown Success",
        {"goal": payload.goal, "breakdown_length": len(result.units), "outcome": result.outcome.value},
    )
    background_tasks.add_task(analytics.record_event, EventType.TASK_BREAKDOWN, {"task_description": payload.goal})

    return BreakdownResponse(
        breakdown=result.units,
        unit_count=len(result.units),
        expected_unit_count=result.expected_unit_count,
        outcome=result.outcome,
        mode=result.mode,
        fallback_units=result.fallback_units,
        request_id=request_id or "",
    )


@router.post("/summary", response_model=SummaryResponse)
def summarize_breakdown_endpoint(
    payload: BreakdownPayload,
    llm=Depends(get_llm_client),
    attempt_log: AttemptLog = Depends(get_attempt_log),
) -> SummaryResponse:
    """Summarize a breakdown in one short sentence."""
    try:
        with trace("breakdown.summary", metadata={"units": len(payload.breakdown)}):
            result = summarize_breakdown(payload.breakdown, llm)
    except UpstreamModelError as exc:
        attempt_log.log_error(exc, "Summary")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to summarize breakdown") from exc
    attempt_log.log_model_response("Summary", {"summary": result.summary, "progress": result.progress})
    return SummaryResponse(summary=result.summary, progress=result.progress)


@router.post("/analysis", response_model=AnalysisResponse)
def analyze_breakdown_endpoint(payload: AnalysisRequest) -> AnalysisResponse:
    analysis = analyze_breakdown(payload.request, payload.breakdown, payload.skill_level)
    return AnalysisResponse(
        complexity=analysis.complexity,
        time_optimization_opportunities=analysis.time_optimization_opportunities,
        resource_requirements=analysis.resource_requirements,
        risk_factors=analysis.risk_factors,
        recommendations=analysis.recommendations,
        suggested_resources=suggest_resources(payload.request.goal),
    )


@router.post("/export/{export_format}")
def export_breakdown_endpoint(
    export_format: Literal["text", "pdf"],
    payload: BreakdownPayload,
    background_tasks: BackgroundTasks,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> Response:
    """Render the breakdown as a downloadable text or PDF file."""
    if export_format == "pdf":
        content: bytes = export_pdf(payload.breakdown)
        media_type, filename = "application/pdf", PDF_FILENAME
    else:
        content = export_text(payload.breakdown).encode("utf-8")
        media_type, filename = "text/plain; charset=utf-8", TEXT_FILENAME

    background_tasks.add_task(analytics.record_event, EventType.DOWNLOAD, {"download_type": export_format})
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
