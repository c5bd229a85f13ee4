from __future__ import annotations

from taskbreakdown.services.errors import LLMConfigurationError, UpstreamModelError

COOKING_PAYLOAD = {
    "goal": "Learn to cook",
    "total_effort": 10,
    "effort_unit": "hours",
    "daily_hours_commitment": 2,
    "granularity": "daily",
}

BREAKDOWN = [
    {"unit": "Day 1 (2 hours focus)", "tasks": ["Buy basic knives", "Learn knife grips"]},
    {"unit": "Day 2 (2 hours focus)", "tasks": ["Cook pasta"]},
]


def test_create_breakdown_returns_units(client, fake_llm, analytics_service) -> None:
    response = client.post("/api/breakdown", json=COOKING_PAYLOAD, headers={"X-Request-Id": "req-42"})

    assert response.status_code == 200
    body = response.json()
    assert [unit["unit"] for unit in body["breakdown"]] == [f"Day {index} (2 hours focus)" for index in range(1, 6)]
    assert body["unit_count"] == 5
    assert body["expected_unit_count"] == 5
    assert body["outcome"] == "success"
    assert body["mode"] == "single_shot"
    assert body["request_id"] == "req-42"
    assert len(fake_llm.calls) == 1

    counters = analytics_service.read_counters()
    assert counters.task_breakdowns_generated == 1
    assert counters.recent_tasks == ["Learn to cook"]


def test_create_breakdown_writes_attempt_log(client, attempt_log) -> None:
    client.post("/api/breakdown", json=COOKING_PAYLOAD)

    files = attempt_log.list_files()
    assert len(files) == 1
    content = (attempt_log.handler.directory / files[0]).read_text(encoding="utf-8")
    assert "USER_ACTION: Action: Task Breakdown Request" in content
    assert "OPENAI_RESPONSE: Context: Task Breakdown" in content
    assert "Task Breakdown Success" in content


def test_invalid_request_is_rejected_before_model_call(client, fake_llm) -> None:
    response = client.post("/api/breakdown", json={**COOKING_PAYLOAD, "goal": "ab"})

    assert response.status_code == 422
    assert fake_llm.calls == []


def test_oversized_plan_returns_bad_request(client, fake_llm) -> None:
    payload = {**COOKING_PAYLOAD, "total_effort": 365, "daily_hours_commitment": 1, "granularity": "weekly"}

    response = client.post("/api/breakdown", json=payload)

    assert response.status_code == 400
    assert "53 weeks" in response.json()["detail"]
    assert fake_llm.calls == []


def test_upstream_failure_returns_bad_gateway(client, fake_llm, analytics_service) -> None:
    def responder(index: int, prompt: str) -> str:
        raise UpstreamModelError("service unavailable")

    fake_llm.responder = responder

    response = client.post("/api/breakdown", json=COOKING_PAYLOAD)

    assert response.status_code == 502
    assert analytics_service.read_counters().task_breakdowns_generated == 0


def test_missing_api_key_returns_service_unavailable(client, fake_llm) -> None:
    def responder(index: int, prompt: str) -> str:
        raise LLMConfigurationError("OPENAI_API_KEY is not configured")

    fake_llm.responder = responder

    response = client.post("/api/breakdown", json=COOKING_PAYLOAD)

    assert response.status_code == 503


def test_unparseable_response_returns_bad_gateway(client, fake_llm, attempt_log) -> None:
    fake_llm.responder = lambda index, prompt: "I am unable to plan that."

    response = client.post("/api/breakdown", json=COOKING_PAYLOAD)

    assert response.status_code == 502
    assert "Failed to generate task breakdown" in response.json()["detail"]
    content = (attempt_log.handler.directory / attempt_log.list_files()[0]).read_text(encoding="utf-8")
    assert "ERROR: Context: Task Breakdown" in content


def test_summary_endpoint(client, fake_llm) -> None:
    fake_llm.responder = lambda index, prompt: "  Two days of kitchen basics.  "

    response = client.post("/api/breakdown/summary", json={"breakdown": BREAKDOWN})

    assert response.status_code == 200
    assert response.json() == {"summary": "Two days of kitchen basics.", "progress": "Summary generated successfully"}
    assert fake_llm.calls[0]["structured"] is False
    assert "Day 1 (2 hours focus):\n- Buy basic knives" in fake_llm.calls[0]["user"]


def test_summary_requires_units(client) -> None:
    response = client.post("/api/breakdown/summary", json={"breakdown": []})

    assert response.status_code == 422


def test_analysis_endpoint(client) -> None:
    response = client.post(
        "/api/breakdown/analysis",
        json={"request": COOKING_PAYLOAD, "breakdown": BREAKDOWN, "skill_level": "beginner"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["complexity"] == "medium"
    assert "Start with shorter daily sessions to build consistency" in body["recommendations"]
    assert body["suggested_resources"][-1] == "Pomodoro timer for focused study sessions"


def test_text_export_is_downloadable(client, analytics_service) -> None:
    response = client.post("/api/breakdown/export/text", json={"breakdown": BREAKDOWN})

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="task_breakdown.txt"'
    assert response.text.startswith("Task Breakdown\n\nDay 1 (2 hours focus)\n  - Buy basic knives\n")
    assert analytics_service.read_counters().downloads_completed == 1


def test_pdf_export_is_downloadable(client) -> None:
    response = client.post("/api/breakdown/export/pdf", json={"breakdown": BREAKDOWN})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_unknown_export_format_is_rejected(client) -> None:
    response = client.post("/api/breakdown/export/docx", json={"breakdown": BREAKDOWN})

    assert response.status_code == 422
