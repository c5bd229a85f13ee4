"""File handler for the user-attempt log, rotated by day and by size.

Files are named ``user_attempts_YYYY-MM-DD_HH-MM-SS-mmm.log``. Each day starts
a new file, and so does any write that would push the newest file of the day
past ``max_bytes``.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

FILE_PREFIX = "user_attempts_"
FILE_SUFFIX = ".log"
DEFAULT_MAX_BYTES = 20 * 1024 * 1024


def resolve_log_directory(log_path: Optional[str]) -> Path:
    """``LOG_PATH`` if set (relative paths resolve against the cwd), else ``./logs``."""
    if log_path:
        path = Path(log_path)
        return path if path.is_absolute() else Path.cwd() / path
    return Path.cwd() / "logs"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttemptFormatter(logging.Formatter):
    """``[2024-05-01T10:00:00.000Z] USER_ACTION: message``"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry_type = getattr(record, "entry_type", record.levelname)
        return f"[{timestamp.isoformat(timespec='milliseconds').replace('+00:00', 'Z')}] {entry_type}: {record.getMessage()}"


class AttemptFileHandler(logging.Handler):
    def __init__(
        self,
        directory: str | Path | None = None,
        *,
        max_bytes: int = DEFAULT_MAX_BYTES,
        env_log_path: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__()
        self.directory = Path(directory) if directory is not None else resolve_log_directory(env_log_path)
        self.max_bytes = max_bytes
        self.env_log_path = env_log_path
        self._clock = clock
        self.setFormatter(AttemptFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = self.format(record) + "\n"
            target = self._target_for(len(payload.encode("utf-8")))
            with target.open("a", encoding="utf-8") as stream:
                stream.write(payload)
        except Exception:
            self.handleError(record)

    def _target_for(self, incoming_bytes: int) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        now = self._clock()
        latest = self._latest_for_day(now.strftime("%Y-%m-%d"))
        if latest is not None and latest.stat().st_size + incoming_bytes <= self.max_bytes:
            return latest
        target = self.directory / self._file_name(now)
        # a full file created within the same millisecond would otherwise be reused
        while target.exists():
            now += timedelta(milliseconds=1)
            target = self.directory / self._file_name(now)
        return target

    def _latest_for_day(self, day: str) -> Optional[Path]:
        candidates = sorted(self.directory.glob(f"{FILE_PREFIX}{day}_*{FILE_SUFFIX}"), reverse=True)
        return candidates[0] if candidates else None

    @staticmethod
    def _file_name(moment: datetime) -> str:
        time_part = moment.strftime("%H-%M-%S-") + f"{moment.microsecond // 1000:03d}"
        return f"{FILE_PREFIX}{moment:%Y-%m-%d}_{time_part}{FILE_SUFFIX}"

    def current_file(self) -> Path:
        """The file the next small entry would be appended to."""
        now = self._clock()
        latest = self._latest_for_day(now.strftime("%Y-%m-%d")) if self.directory.exists() else None
        if latest is not None and latest.stat().st_size < self.max_bytes:
            return latest
        return self.directory / self._file_name(now)

    def list_files(self) -> List[str]:
        """Log file names, newest first."""
        if not self.directory.exists():
            return []
        return sorted(
            (path.name for path in self.directory.glob(f"{FILE_PREFIX}*{FILE_SUFFIX}")),
            reverse=True,
        )

    def cleanup(self, days_to_keep: int = 30) -> List[str]:
        """Delete log files last modified more than ``days_to_keep`` days ago."""
        if not self.directory.exists():
            return []
        cutoff = (self._clock() - timedelta(days=days_to_keep)).timestamp()
        deleted: List[str] = []
        for path in self.directory.glob(f"{FILE_PREFIX}*{FILE_SUFFIX}"):
            if path.stat().st_mtime < cutoff:
                path.unlink()
                deleted.append(path.name)
        return sorted(deleted)

    def info(self) -> Dict[str, Any]:
        return {
            "log_directory": str(self.directory),
            "log_file": str(self.current_file()),
            "env_log_path": self.env_log_path if self.env_log_path is not None else os.environ.get("LOG_PATH"),
            "max_file_size": f"{self.max_bytes / (1024 * 1024):g}MB",
            "current_date": self._clock().strftime("%Y-%m-%d"),
        }
