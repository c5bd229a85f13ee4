"""Attempt-log inspection and cleanup endpoints."""
from __future__ import annotations

import logging
import re
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from taskbreakdown.api.deps import get_attempt_log
from taskbreakdown.api.schemas.logs import (
    LogCleanupRequest,
    LogCleanupResponse,
    LogConfiguration,
    LogFileEntry,
    LogFileListResponse,
    LogFilesSummary,
    LogInfoResponse,
    RotationInfo,
)
from taskbreakdown.core.config import settings
from taskbreakdown.services.attempt_log import AttemptLog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["logs"])

_FILE_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})")


def _summary(files: List[str]) -> LogFilesSummary:
    return LogFilesSummary(count=len(files), files=files)


def _cleanup(attempt_log: AttemptLog, days_to_keep: int) -> LogCleanupResponse:
    try:
        deleted = attempt_log.cleanup(days_to_keep)
    except OSError as exc:
        logger.exception("Log cleanup failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to cleanup logs") from exc
    return LogCleanupResponse(
        success=True,
        message=f"Log cleanup completed. Kept logs from last {days_to_keep} days.",
        deleted_files=deleted,
        remaining_files=_summary(attempt_log.list_files()),
    )


@router.get("/log-info", response_model=LogInfoResponse)
def read_log_info(attempt_log: AttemptLog = Depends(get_attempt_log)) -> LogInfoResponse:
    """Where attempt logs live, which files exist and how they rotate."""
    info = attempt_log.info()
    return LogInfoResponse(
        success=True,
        log_configuration=LogConfiguration(**info),
        log_files=_summary(attempt_log.list_files()),
        rotation_info=RotationInfo(
            max_file_size=info["max_file_size"],
            rotation_triggers=["Daily (new date)", f"File size exceeds {info['max_file_size']}"],
            file_naming="user_attempts_YYYY-MM-DD_HH-MM-SS-mmm.log",
        ),
        retention_days=settings.log_retention_days,
    )


@router.get("/log-files", response_model=LogFileListResponse)
def list_log_files(attempt_log: AttemptLog = Depends(get_attempt_log)) -> LogFileListResponse:
    entries = []
    for name in attempt_log.list_files():
        match = _FILE_DATE.search(name)
        entries.append(LogFileEntry(name=name, date=match.group(1) if match else ""))
    return LogFileListResponse(success=True, count=len(entries), files=entries)


@router.get("/log-cleanup", response_model=LogCleanupResponse)
def cleanup_logs_with_defaults(
    days_to_keep: int = Query(default=30, ge=1, le=365),
    attempt_log: AttemptLog = Depends(get_attempt_log),
) -> LogCleanupResponse:
    return _cleanup(attempt_log, days_to_keep)


@router.post("/log-cleanup", response_model=LogCleanupResponse)
def cleanup_logs(
    payload: LogCleanupRequest,
    attempt_log: AttemptLog = Depends(get_attempt_log),
) -> LogCleanupResponse:
    """Delete attempt-log files older than ``days_to_keep`` days."""
    return _cleanup(attempt_log, payload.days_to_keep)
