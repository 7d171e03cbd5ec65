"""Tests for the scheduled Supabase housekeeping runner."""

import logging
from types import SimpleNamespace

import httpx
import pytest
from postgrest.exceptions import APIError

from dreamcentre.config import ConfigurationError, load_task_settings
from dreamcentre.tasks import scheduled
from dreamcentre.tasks.scheduled import TaskOutcome, main, run_scheduled_job, run_scheduled_tasks


class FakeRpc:
    def __init__(self, error=None):
        self.error = error

    def execute(self):
        if self.error:
            raise self.error
        return SimpleNamespace(data=None)


class FakeSupabase:
    """Records rpc() calls; errors maps procedure name to the exception execute() raises."""

    def __init__(self, errors=None):
        self.errors = errors or {}
        self.calls = []

    def rpc(self, name, params=None):
        self.calls.append(name)
        return FakeRpc(self.errors.get(name))


def api_error(message):
    return APIError({"message": message, "code": "P0001", "hint": None, "details": None})


def messages(caplog):
    return [record.getMessage() for record in caplog.records]


def test_both_procedures_succeed_in_order(caplog):
    caplog.set_level(logging.INFO)
    client = FakeSupabase()

    outcomes = run_scheduled_tasks(client)

    assert client.calls == ["publish_scheduled_events", "archive_past_events"]
    assert outcomes == [TaskOutcome("publish_scheduled_events"), TaskOutcome("archive_past_events")]

    logged = messages(caplog)
    published = logged.index("✓ Published scheduled events")
    archived = logged.index("✓ Archived past events")
    assert published < archived
    assert logged[-1] == "Scheduled tasks completed successfully!"


def test_publish_failure_does_not_block_archive(caplog):
    caplog.set_level(logging.INFO)
    client = FakeSupabase({"publish_scheduled_events": api_error("function does not exist")})

    outcomes = run_scheduled_tasks(client)

    assert client.calls == ["publish_scheduled_events", "archive_past_events"]
    assert outcomes[0].error
    assert outcomes[1].error is None

    logged = messages(caplog)
    assert any(m.startswith("Error publishing scheduled events") for m in logged)
    assert "✓ Published scheduled events" not in logged
    assert "✓ Archived past events" in logged


def test_transport_error_is_a_remote_call_error(caplog):
    caplog.set_level(logging.INFO)
    request = httpx.Request("POST", "https://project.supabase.co/rest/v1/rpc/archive_past_events")
    client = FakeSupabase({"archive_past_events": httpx.ConnectError("down", request=request)})

    outcomes = run_scheduled_tasks(client)

    assert outcomes[1] == TaskOutcome("archive_past_events", "down")
    assert any(m.startswith("Error archiving past events") for m in messages(caplog))


def test_error_without_message_is_still_a_failure(caplog):
    caplog.set_level(logging.INFO)
    request = httpx.Request("POST", "https://project.supabase.co/rest/v1/rpc/publish_scheduled_events")
    client = FakeSupabase({"publish_scheduled_events": httpx.ReadTimeout("", request=request)})

    outcomes = run_scheduled_tasks(client)

    assert outcomes[0] == TaskOutcome("publish_scheduled_events", "ReadTimeout")
    assert outcomes[1].error is None

    logged = messages(caplog)
    assert "Error publishing scheduled events: ReadTimeout" in logged
    assert "✓ Published scheduled events" not in logged
    assert "✓ Archived past events" in logged


def test_unexpected_exception_escapes_the_sequence():
    client = FakeSupabase({"publish_scheduled_events": RuntimeError("bad client")})

    with pytest.raises(RuntimeError):
        run_scheduled_tasks(client)


def test_load_task_settings_accepts_vite_alias(monkeypatch):
    monkeypatch.setenv("VITE_SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")

    settings = load_task_settings()

    assert settings.supabase_url == "https://project.supabase.co"
    assert settings.supabase_service_role_key == "service-role-key"


def test_load_task_settings_rejects_blank_values(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "   ")

    with pytest.raises(ConfigurationError):
        load_task_settings()


def test_main_without_configuration_exits_1_without_calls(monkeypatch, caplog):
    def fail_if_called(*args):
        raise AssertionError("client must not be created")

    monkeypatch.setattr(scheduled, "create_service_client", fail_if_called)

    assert main() == 1
    assert "Missing required environment variables" in messages(caplog)


def test_main_with_partial_failure_exits_0(monkeypatch, supabase_env):
    client = FakeSupabase({"publish_scheduled_events": api_error("boom")})
    monkeypatch.setattr(scheduled, "create_service_client", lambda url, key: client)

    assert main() == 0
    assert client.calls == ["publish_scheduled_events", "archive_past_events"]


def test_main_passes_configuration_to_client(monkeypatch, supabase_env):
    created = []

    def factory(url, key):
        created.append((url, key))
        return FakeSupabase()

    monkeypatch.setattr(scheduled, "create_service_client", factory)

    assert main() == 0
    assert created == [("https://project.supabase.co", "service-role-key")]


def test_main_client_construction_failure_exits_1(monkeypatch, supabase_env, caplog):
    def broken(url, key):
        raise ValueError("Invalid URL")

    monkeypatch.setattr(scheduled, "create_service_client", broken)

    assert main() == 1
    assert "Error running scheduled tasks" in messages(caplog)


def test_scheduled_job_logs_instead_of_raising(monkeypatch, supabase_env, caplog):
    client = FakeSupabase({"archive_past_events": RuntimeError("bad client")})
    monkeypatch.setattr(scheduled, "create_service_client", lambda url, key: client)

    run_scheduled_job()

    assert "Error running scheduled tasks" in messages(caplog)
