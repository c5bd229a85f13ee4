"""Logging setup: request-scoped console output plus the rotating user-attempt files."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Optional

from taskbreakdown.core.context import get_request_id
from taskbreakdown.core.log_rotation import DEFAULT_MAX_BYTES, AttemptFileHandler

NOISY_LOGGERS = ("httpx", "httpcore", "openai")
ATTEMPT_LOGGER = "taskbreakdown.attempts"


class RequestIdFilter(logging.Filter):
    """Stamp records with the current request id, or ``-`` outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        return True


def configure_logging(
    *,
    log_level: str = "INFO",
    log_path: Optional[str] = None,
    attempt_max_bytes: int = DEFAULT_MAX_BYTES,
) -> None:
    """Configure application logging once at startup.

    User attempts go to ``ATTEMPT_LOGGER``, which writes only to the rotating
    attempt files under ``log_path`` and does not propagate to the console.
    """
    if getattr(configure_logging, "_configured", False):
        return

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
                },
                "attempt": {
                    "()": "taskbreakdown.core.log_rotation.AttemptFormatter",
                },
            },
            "filters": {
                "request_id": {
                    "()": "taskbreakdown.core.logging.RequestIdFilter",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                    "level": log_level,
                    "filters": ["request_id"],
                },
                "attempts": {
                    "()": "taskbreakdown.core.log_rotation.AttemptFileHandler",
                    "formatter": "attempt",
                    "max_bytes": attempt_max_bytes,
                    "env_log_path": log_path,
                },
            },
            "loggers": {
                ATTEMPT_LOGGER: {"handlers": ["attempts"], "level": "INFO", "propagate": False},
                **{name: {"level": "WARNING"} for name in NOISY_LOGGERS},
            },
            "root": {
                "handlers": ["console"],
                "level": log_level,
            },
        }
    )

    logging.getLogger(__name__).debug(
        "Logging configured at %s; attempt files in %s", log_level, get_attempt_handler().directory
    )
    setattr(configure_logging, "_configured", True)


def get_attempt_handler() -> AttemptFileHandler:
    """The rotating file handler installed on ``ATTEMPT_LOGGER`` by ``configure_logging``."""
    for handler in logging.getLogger(ATTEMPT_LOGGER).handlers:
        if isinstance(handler, AttemptFileHandler):
            return handler
    raise RuntimeError("configure_logging() has not installed the attempt-log handler")
