from __future__ import annotations

import logging

from taskbreakdown.core import logging as core_logging
from taskbreakdown.core.log_rotation import AttemptFileHandler, AttemptFormatter
from taskbreakdown.services.attempt_log import AttemptLog


def test_configure_logging_installs_attempt_handler(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(core_logging.configure_logging, "_configured", False)

    core_logging.configure_logging(log_level="INFO", log_path=str(tmp_path), attempt_max_bytes=1024)

    handler = core_logging.get_attempt_handler()
    assert isinstance(handler, AttemptFileHandler)
    assert isinstance(handler.formatter, AttemptFormatter)
    assert handler.directory == tmp_path
    assert handler.max_bytes == 1024
    assert logging.getLogger(core_logging.ATTEMPT_LOGGER).propagate is False


def test_attempt_entries_land_in_configured_directory(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(core_logging.configure_logging, "_configured", False)
    core_logging.configure_logging(log_path=str(tmp_path))

    AttemptLog(core_logging.get_attempt_handler()).log_user_action("Visit", {"page": "home"})

    files = sorted(tmp_path.glob("user_attempts_*.log"))
    assert len(files) == 1
    assert "USER_ACTION: Action: Visit" in files[0].read_text(encoding="utf-8")


def test_configure_logging_runs_once(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(core_logging.configure_logging, "_configured", False)
    core_logging.configure_logging(log_path=str(tmp_path / "first"))
    core_logging.configure_logging(log_path=str(tmp_path / "second"))

    assert core_logging.get_attempt_handler().directory == tmp_path / "first"
