"""Analytics backend used when tracking is disabled (logs only)."""
from __future__ import annotations

import logging

from taskbreakdown.services.analytics.base import AnalyticsCounters, AnalyticsEvent, AnalyticsService

logger = logging.getLogger(__name__)


class NoopAnalyticsService(AnalyticsService):
    storage_description = "Disabled"

    def _record(self, event: AnalyticsEvent) -> AnalyticsCounters:
        logger.debug("Analytics disabled; dropping %s event", event.type.value)
        return AnalyticsCounters()

    def _read(self) -> AnalyticsCounters:
        return AnalyticsCounters()
