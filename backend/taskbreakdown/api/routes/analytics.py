"""Usage analytics endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from taskbreakdown.api.deps import get_analytics_service
from taskbreakdown.api.schemas.analytics import (
    AnalyticsEventPayload,
    AnalyticsEventsResponse,
    AnalyticsMetricsPayload,
    AnalyticsResponse,
    TrackDownloadRequest,
    TrackResponse,
)
from taskbreakdown.services.analytics.base import AnalyticsService, EventType

router = APIRouter(prefix="/api", tags=["analytics"])

SAMPLE_SIZE = 10
SAMPLE_TEXT_LENGTH = 50


def _truncate(text: str) -> str:
    if len(text) <= SAMPLE_TEXT_LENGTH:
        return text
    return text[:SAMPLE_TEXT_LENGTH] + "..."


@router.get("/analytics", response_model=AnalyticsResponse)
def read_analytics(analytics: AnalyticsService = Depends(get_analytics_service)) -> AnalyticsResponse:
    """Current counters plus a short sample of recent goals."""
    counters = analytics.read_counters()
    metrics = AnalyticsMetricsPayload(
        task_breakdowns_generated=counters.task_breakdowns_generated,
        emails_sent=counters.emails_sent,
        downloads_completed=counters.downloads_completed,
        visits_count=counters.visits_count,
        last_updated=counters.last_updated,
        recent_tasks_count=len(counters.recent_tasks),
        recent_tasks_sample=[_truncate(task) for task in counters.recent_tasks[:SAMPLE_SIZE]],
    )
    return AnalyticsResponse(
        success=True,
        metrics=metrics,
        storage=analytics.storage_description,
        message="Analytics retrieved successfully",
    )


@router.get("/analytics/events", response_model=AnalyticsEventsResponse)
def list_analytics_events(
    limit: int = Query(default=100, ge=1, le=1000),
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsEventsResponse:
    events = analytics.recent_events(limit)
    return AnalyticsEventsResponse(
        events=[
            AnalyticsEventPayload(type=event.type.value, timestamp=event.timestamp, data=event.data)
            for event in events
        ]
    )


@router.post("/track-download", response_model=TrackResponse)
def track_download(
    payload: TrackDownloadRequest,
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> TrackResponse:
    analytics.record_event(EventType.DOWNLOAD, {"download_type": payload.download_type})
    return TrackResponse(success=True, message="Download tracked successfully")


@router.post("/track-visit", response_model=TrackResponse)
def track_visit(analytics: AnalyticsService = Depends(get_analytics_service)) -> TrackResponse:
    analytics.record_event(EventType.VISIT)
    return TrackResponse(success=True, message="Visit tracked successfully")
