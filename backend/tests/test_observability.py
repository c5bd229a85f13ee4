"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib

import pytest

from taskbreakdown.observability import client as client_module
from taskbreakdown.observability.tracing import trace


class _DummyTrace:
    def __init__(self, metadata=None, **kwargs):
        self.metadata = metadata or {}
        self.error_info = None
        self.ended = False

    def update(self, error_info=None, **kwargs):
        self.error_info = error_info

    def end(self):
        self.ended = True


class _DummyOpik:
    def __init__(self, *args, **kwargs):
        self.traces = []

    def trace(self, **kwargs):
        handle = _DummyTrace(metadata=kwargs.get("metadata"))
        self.traces.append(handle)
        return handle


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import taskbreakdown.core.config as core_config
    import taskbreakdown.main as main_module

    importlib.reload(core_config)
    importlib.reload(client_module)
    reloaded_app = importlib.reload(main_module)

    assert hasattr(reloaded_app, "app")
    assert client_module.get_opik_client() is None


def test_trace_is_noop_without_client(monkeypatch) -> None:
    monkeypatch.setattr(client_module, "get_opik_client", lambda: None)

    with trace("demo") as handle:
        assert handle is None


def test_trace_records_request_id_and_closes(monkeypatch) -> None:
    dummy = _DummyOpik()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: dummy)

    with trace("demo", metadata={"route": "/demo"}, request_id="req-1"):
        pass

    assert dummy.traces[0].metadata == {"route": "/demo", "request_id": "req-1"}
    assert dummy.traces[0].ended is True


def test_trace_attaches_error_and_reraises(monkeypatch) -> None:
    dummy = _DummyOpik()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: dummy)

    with pytest.raises(RuntimeError):
        with trace("demo"):
            raise RuntimeError("boom")

    assert dummy.traces[0].error_info == {"message": "boom"}
    assert dummy.traces[0].ended is True
