"""Schemas for log inspection and cleanup endpoints."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class LogConfiguration(BaseModel):
    log_directory: str
    log_file: str
    env_log_path: Optional[str] = None
    max_file_size: str
    current_date: str


class LogFileEntry(BaseModel):
    name: str
    date: str


class LogFilesSummary(BaseModel):
    count: int
    files: List[str]


class RotationInfo(BaseModel):
    max_file_size: str
    rotation_triggers: List[str]
    file_naming: str


class LogInfoResponse(BaseModel):
    success: bool
    log_configuration: LogConfiguration
    log_files: LogFilesSummary
    rotation_info: RotationInfo
    retention_days: int


class LogCleanupRequest(BaseModel):
    days_to_keep: int = Field(default=30, ge=1, le=365)


class LogCleanupResponse(BaseModel):
    success: bool
    message: str
    deleted_files: List[str]
    remaining_files: LogFilesSummary


class LogFileListResponse(BaseModel):
    success: bool
    count: int
    files: List[LogFileEntry]
