"""Opik SDK client lifecycle."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from opik import Opik

from taskbreakdown.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[Opik] = None
_client_lock = Lock()
_init_attempted = False


def get_opik_client() -> Optional[Opik]:
    """Return the shared Opik client, creating it on first use when tracing is enabled."""
    global _client, _init_attempted

    if _client is not None:
        return _client

    with _client_lock:
        if not _init_attempted:
            _init_attempted = True
            _client = _create_client()
    return _client


def reset_opik_client() -> None:
    """Forget the cached client so the next call re-reads settings."""
    global _client, _init_attempted

    with _client_lock:
        _client = None
        _init_attempted = False


def _create_client() -> Optional[Opik]:
    if not settings.opik_enabled:
        return None

    if not settings.opik_api_key:
        logger.warning("OPIK_ENABLED is true but OPIK_API_KEY is missing; tracing disabled.")
        return None

    try:
        client = Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
    except Exception as exc:  # pragma: no cover - depends on remote service
        logger.warning("Failed to initialize Opik, tracing will be disabled: %s", exc)
        return None

    logger.info("Opik tracing enabled (project=%s).", settings.opik_project)
    return client
