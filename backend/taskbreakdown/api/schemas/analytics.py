"""Schemas for analytics endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel


class TrackDownloadRequest(BaseModel):
    download_type: Literal["pdf", "text"]


class TrackResponse(BaseModel):
    success: bool
    message: str


class AnalyticsMetricsPayload(BaseModel):
    task_breakdowns_generated: int
    emails_sent: int
    downloads_completed: int
    visits_count: int
    last_updated: datetime
    recent_tasks_count: int
    recent_tasks_sample: List[str]


class AnalyticsResponse(BaseModel):
    success: bool
    metrics: AnalyticsMetricsPayload
    storage: str
    message: str


class AnalyticsEventPayload(BaseModel):
    type: str
    timestamp: datetime
    data: Optional[Dict[str, Any]] = None


class AnalyticsEventsResponse(BaseModel):
    events: List[AnalyticsEventPayload]
