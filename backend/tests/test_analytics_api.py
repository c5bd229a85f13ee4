from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from taskbreakdown.api.deps import get_analytics_service
from taskbreakdown.services.analytics.base import EventType
from taskbreakdown.services.analytics.database_store import DatabaseAnalyticsService


def test_analytics_reports_counters_and_sample(client, analytics_service) -> None:
    long_goal = "Build a full-stack web application with authentication and payments"
    analytics_service.record_event(EventType.TASK_BREAKDOWN, {"task_description": long_goal})
    analytics_service.record_event(EventType.TASK_BREAKDOWN, {"task_description": "Learn to cook"})

    response = client.get("/api/analytics")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["metrics"]["task_breakdowns_generated"] == 2
    assert body["metrics"]["recent_tasks_count"] == 2
    assert body["metrics"]["recent_tasks_sample"] == ["Learn to cook", long_goal[:50] + "..."]
    assert body["storage"].startswith("Local file")


def test_analytics_sample_is_limited_to_ten(client, analytics_service) -> None:
    for index in range(15):
        analytics_service.record_event(EventType.TASK_BREAKDOWN, {"task_description": f"Goal {index}"})

    body = client.get("/api/analytics").json()

    assert body["metrics"]["recent_tasks_count"] == 15
    assert len(body["metrics"]["recent_tasks_sample"]) == 10


def test_track_download(client, analytics_service) -> None:
    response = client.post("/api/track-download", json={"download_type": "pdf"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Download tracked successfully"}
    assert analytics_service.read_counters().downloads_completed == 1


def test_track_download_rejects_unknown_type(client, analytics_service) -> None:
    response = client.post("/api/track-download", json={"download_type": "docx"})

    assert response.status_code == 422
    assert analytics_service.read_counters().downloads_completed == 0


def test_track_visit(client, analytics_service) -> None:
    response = client.post("/api/track-visit")

    assert response.status_code == 200
    assert analytics_service.read_counters().visits_count == 1


@pytest.fixture()
def database_client(client):
    from taskbreakdown.main import app

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    service = DatabaseAnalyticsService(engine)
    app.dependency_overrides[get_analytics_service] = lambda: service
    yield client, service
    service.close()


def test_events_endpoint_lists_recent_events(database_client) -> None:
    test_client, _ = database_client
    test_client.post("/api/track-visit")
    test_client.post("/api/track-download", json={"download_type": "text"})

    response = test_client.get("/api/analytics/events", params={"limit": 1})

    assert response.status_code == 200
    events = response.json()["events"]
    assert len(events) == 1
    assert events[0]["type"] == "download"
    assert events[0]["data"] == {"download_type": "text"}
