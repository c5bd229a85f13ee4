"""Shared FastAPI dependencies."""
from __future__ import annotations

from functools import lru_cache

from taskbreakdown.core.config import settings
from taskbreakdown.core.logging import get_attempt_handler
from taskbreakdown.services.analytics.base import AnalyticsService
from taskbreakdown.services.analytics.factory import get_analytics_service as _analytics_service
from taskbreakdown.services.attempt_log import AttemptLog
from taskbreakdown.services.llm_client import OpenAIChatClient


@lru_cache
def get_llm_client() -> OpenAIChatClient:
    return OpenAIChatClient(settings)


def get_analytics_service() -> AnalyticsService:
    return _analytics_service()


@lru_cache
def get_attempt_log() -> AttemptLog:
    return AttemptLog(get_attempt_handler())
