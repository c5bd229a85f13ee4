"""Record of what users asked for and what the model returned."""
from __future__ import annotations

import json
import logging
import traceback
from typing import Any, Dict, List

from taskbreakdown.core.log_rotation import AttemptFileHandler
from taskbreakdown.core.logging import ATTEMPT_LOGGER

logger = logging.getLogger(__name__)
attempt_logger = logging.getLogger(ATTEMPT_LOGGER)


class AttemptLog:
    """Writes user actions, model responses and errors to the rotating attempt files.

    Write failures go through ``logging.Handler.handleError`` and are never
    raised to the caller.
    """

    def __init__(self, handler: AttemptFileHandler) -> None:
        self.handler = handler

    def log_user_action(self, action: str, details: Dict[str, Any]) -> None:
        self._write("USER_ACTION", f"Action: {action}\nDetails: {_dump(details)}")

    def log_model_response(self, context: str, response: Any) -> None:
        self._write("OPENAI_RESPONSE", f"Context: {context}\nResponse: {_dump(response)}")

    def log_error(self, error: BaseException, context: str) -> None:
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self._write("ERROR", f"Context: {context}\nError: {error}\nStack: {stack}", level=logging.ERROR)

    def info(self) -> Dict[str, Any]:
        return self.handler.info()

    def list_files(self) -> List[str]:
        return self.handler.list_files()

    def cleanup(self, days_to_keep: int = 30) -> List[str]:
        deleted = self.handler.cleanup(days_to_keep)
        if deleted:
            logger.info("Cleaned up %d old log file(s)", len(deleted))
        return deleted

    def _write(self, entry_type: str, content: str, level: int = logging.INFO) -> None:
        record = attempt_logger.makeRecord(
            attempt_logger.name,
            level,
            __file__,
            0,
            content,
            None,
            None,
            extra={"entry_type": entry_type},
        )
        self.handler.handle(record)
        logger.debug("%s logged to %s", entry_type, self.handler.directory)


def _dump(value: Any) -> str:
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json")
    return json.dumps(value, indent=2, default=str)
