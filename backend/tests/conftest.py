from __future__ import annotations

import json
import re
from typing import Any, Callable, List, Optional

import pytest
from fastapi.testclient import TestClient

from taskbreakdown.api.deps import get_analytics_service, get_attempt_log, get_llm_client
from taskbreakdown.core.log_rotation import AttemptFileHandler
from taskbreakdown.services.analytics.file_store import FileAnalyticsService
from taskbreakdown.services.attempt_log import AttemptLog

_RANGE_RE = re.compile(r"Produce ONLY (day|week)s (\d+) to (\d+)")
_COUNT_RE = re.compile(r"exactly (\d+) (day|week) units")


def breakdown_json(noun: str, start: int, end: int, hours: str = "2") -> str:
    return json.dumps(
        {
            "breakdown": [
                {"unit": f"{noun} {index} ({hours} hours focus)", "tasks": [f"Task for {noun.lower()} {index}"]}
                for index in range(start, end + 1)
            ]
        }
    )


def echo_requested_units(user_prompt: str) -> str:
    """Answer with exactly the units a prompt asks for."""
    match = _RANGE_RE.search(user_prompt)
    if match:
        noun, start, end = match.group(1).capitalize(), int(match.group(2)), int(match.group(3))
    else:
        count = _COUNT_RE.search(user_prompt)
        noun, start, end = count.group(2).capitalize(), 1, int(count.group(1))
    return breakdown_json(noun, start, end)


class FakeLLM:
    """Stands in for ``OpenAIChatClient``.

    ``responder`` receives the call index and the user prompt and returns the
    completion text or raises.
    """

    def __init__(self, responder: Optional[Callable[[int, str], str]] = None) -> None:
        self.responder = responder or (lambda index, prompt: echo_requested_units(prompt))
        self.calls: List[dict[str, Any]] = []

    def complete(self, system_prompt: str, user_prompt: str, *, structured: bool = True) -> str:
        index = len(self.calls)
        self.calls.append({"system": system_prompt, "user": user_prompt, "structured": structured})
        return self.responder(index, user_prompt)


@pytest.fixture()
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture()
def analytics_service(tmp_path) -> FileAnalyticsService:
    return FileAnalyticsService(tmp_path / "analytics")


@pytest.fixture()
def attempt_log(tmp_path) -> AttemptLog:
    return AttemptLog(AttemptFileHandler(tmp_path / "logs"))


@pytest.fixture()
def client(fake_llm, analytics_service, attempt_log):
    from taskbreakdown.main import app

    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_analytics_service] = lambda: analytics_service
    app.dependency_overrides[get_attempt_log] = lambda: attempt_log
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
