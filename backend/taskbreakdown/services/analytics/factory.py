"""Analytics service factory."""
from __future__ import annotations

import logging
from functools import lru_cache

from taskbreakdown.core.config import settings
from taskbreakdown.core.log_rotation import resolve_log_directory
from taskbreakdown.db.session import build_engine
from taskbreakdown.services.analytics.base import AnalyticsService
from taskbreakdown.services.analytics.database_store import DatabaseAnalyticsService
from taskbreakdown.services.analytics.file_store import FileAnalyticsService
from taskbreakdown.services.analytics.noop import NoopAnalyticsService

logger = logging.getLogger(__name__)


@lru_cache
def get_analytics_service() -> AnalyticsService:
    if not settings.analytics_enabled:
        return NoopAnalyticsService()

    if settings.analytics_backend == "database":
        try:
            service = DatabaseAnalyticsService(build_engine(settings.analytics_database_url))
        except Exception:
            logger.exception("Failed to initialise database analytics, falling back to file storage")
        else:
            logger.info("Using database analytics storage")
            return service

    logger.info("Using file-based analytics storage")
    return FileAnalyticsService(resolve_log_directory(settings.log_path))
