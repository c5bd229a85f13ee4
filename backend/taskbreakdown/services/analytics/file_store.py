"""Analytics counters kept in a JSON file next to the application logs."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock

from pydantic import ValidationError

from taskbreakdown.services.analytics.base import (
    AnalyticsCounters,
    AnalyticsEvent,
    AnalyticsService,
    apply_event,
)

logger = logging.getLogger(__name__)

ANALYTICS_FILENAME = "analytics.json"


class FileAnalyticsService(AnalyticsService):
    """Single-process file backend; a lock serialises read-modify-write cycles."""

    def __init__(self, directory: str | Path) -> None:
        self.path = Path(directory) / ANALYTICS_FILENAME
        self._lock = Lock()

    @property
    def storage_description(self) -> str:  # type: ignore[override]
        return f"Local file - {self.path}"

    def _load(self) -> AnalyticsCounters:
        if not self.path.exists():
            counters = AnalyticsCounters()
            self._write(counters)
            return counters
        try:
            return AnalyticsCounters.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.error("Unreadable analytics file %s, using defaults: %s", self.path, exc)
            return AnalyticsCounters()

    def _write(self, counters: AnalyticsCounters) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(counters.model_dump(mode="json"), indent=2)
        self.path.write_text(payload, encoding="utf-8")

    def _record(self, event: AnalyticsEvent) -> AnalyticsCounters:
        with self._lock:
            counters = apply_event(self._load(), event)
            self._write(counters)
        return counters

    def _read(self) -> AnalyticsCounters:
        with self._lock:
            return self._load()
