"""Analytics service interface and the counter model shared by backends."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

MAX_RECENT_TASKS = 50


class EventType(str, Enum):
    TASK_BREAKDOWN = "task_breakdown"
    DOWNLOAD = "download"
    VISIT = "visit"
    EMAIL_SENT = "email_sent"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AnalyticsCounters(BaseModel):
    task_breakdowns_generated: int = 0
    emails_sent: int = 0
    downloads_completed: int = 0
    visits_count: int = 0
    last_updated: datetime = Field(default_factory=_now)
    recent_tasks: List[str] = Field(default_factory=list)


class AnalyticsEvent(BaseModel):
    type: EventType
    timestamp: datetime = Field(default_factory=_now)
    data: Optional[Dict[str, Any]] = None


def apply_event(counters: AnalyticsCounters, event: AnalyticsEvent) -> AnalyticsCounters:
    """Return ``counters`` updated for one event."""
    updated = counters.model_copy(deep=True)
    if event.type == EventType.TASK_BREAKDOWN:
        updated.task_breakdowns_generated += 1
        description = (event.data or {}).get("task_description")
        if description:
            updated.recent_tasks = [description, *updated.recent_tasks][:MAX_RECENT_TASKS]
    elif event.type == EventType.DOWNLOAD:
        updated.downloads_completed += 1
    elif event.type == EventType.VISIT:
        updated.visits_count += 1
    elif event.type == EventType.EMAIL_SENT:
        updated.emails_sent += 1
    updated.last_updated = event.timestamp
    return updated


class AnalyticsService:
    """Base class for analytics backends.

    ``record_event`` and ``read_counters`` never raise: analytics must not
    break the user-facing flow, so backend errors are logged and dropped.
    Subclasses implement the underscored hooks.
    """

    storage_description = "No analytics storage available"

    def record_event(self, event_type: EventType, data: Optional[Dict[str, Any]] = None) -> None:
        event = AnalyticsEvent(type=event_type, data=data)
        try:
            counters = self._record(event)
        except Exception:
            logger.exception("Failed to record analytics event %s", event_type.value)
            return
        logger.info("Analytics: %s recorded (%s)", event_type.value, _counter_summary(counters))

    def read_counters(self) -> AnalyticsCounters:
        try:
            return self._read()
        except Exception:
            logger.exception("Failed to read analytics counters")
            return AnalyticsCounters()

    def recent_events(self, limit: int = 100) -> List[AnalyticsEvent]:
        try:
            return self._recent_events(limit)
        except Exception:
            logger.exception("Failed to read recent analytics events")
            return []

    def close(self) -> None:
        """Release backend resources."""

    def _record(self, event: AnalyticsEvent) -> AnalyticsCounters:
        raise NotImplementedError

    def _read(self) -> AnalyticsCounters:
        raise NotImplementedError

    def _recent_events(self, limit: int) -> List[AnalyticsEvent]:
        return []


def _counter_summary(counters: AnalyticsCounters) -> str:
    return (
        f"breakdowns={counters.task_breakdowns_generated} downloads={counters.downloads_completed} "
        f"visits={counters.visits_count} emails={counters.emails_sent}"
    )
