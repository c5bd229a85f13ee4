from __future__ import annotations

import os
import time


def _write_log(directory, name: str, age_days: float) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text("entry\n", encoding="utf-8")
    moment = time.time() - age_days * 86400
    os.utime(path, (moment, moment))


def test_log_info(client, attempt_log) -> None:
    _write_log(attempt_log.handler.directory, "user_attempts_2024-05-01_09-00-00-000.log", 1)

    response = client.get("/api/log-info")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["log_configuration"]["log_directory"] == str(attempt_log.handler.directory)
    assert body["log_configuration"]["max_file_size"] == "20MB"
    assert body["log_files"] == {"count": 1, "files": ["user_attempts_2024-05-01_09-00-00-000.log"]}
    assert body["rotation_info"]["max_file_size"] == "20MB"
    assert body["retention_days"] == 30


def test_log_files_are_listed_with_dates(client, attempt_log) -> None:
    _write_log(attempt_log.handler.directory, "user_attempts_2024-05-01_09-00-00-000.log", 1)
    _write_log(attempt_log.handler.directory, "user_attempts_2024-05-03_09-00-00-000.log", 1)

    body = client.get("/api/log-files").json()

    assert body["count"] == 2
    assert body["files"][0] == {"name": "user_attempts_2024-05-03_09-00-00-000.log", "date": "2024-05-03"}


def test_log_cleanup_with_body(client, attempt_log) -> None:
    directory = attempt_log.handler.directory
    _write_log(directory, "user_attempts_2024-01-01_09-00-00-000.log", 10)
    _write_log(directory, "user_attempts_2024-01-09_09-00-00-000.log", 2)

    response = client.post("/api/log-cleanup", json={"days_to_keep": 7})

    assert response.status_code == 200
    body = response.json()
    assert body["deleted_files"] == ["user_attempts_2024-01-01_09-00-00-000.log"]
    assert body["remaining_files"]["count"] == 1
    assert body["message"] == "Log cleanup completed. Kept logs from last 7 days."


def test_log_cleanup_defaults_to_thirty_days(client, attempt_log) -> None:
    directory = attempt_log.handler.directory
    _write_log(directory, "user_attempts_2024-01-01_09-00-00-000.log", 40)
    _write_log(directory, "user_attempts_2024-02-01_09-00-00-000.log", 20)

    body = client.get("/api/log-cleanup").json()

    assert body["deleted_files"] == ["user_attempts_2024-01-01_09-00-00-000.log"]
    assert body["remaining_files"]["files"] == ["user_attempts_2024-02-01_09-00-00-000.log"]


def test_log_cleanup_rejects_out_of_range_retention(client) -> None:
    assert client.post("/api/log-cleanup", json={"days_to_keep": 0}).status_code == 422
    assert client.post("/api/log-cleanup", json={"days_to_keep": 366}).status_code == 422
