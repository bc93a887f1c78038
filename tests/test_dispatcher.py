"""
Dispatcher Tests
----------------
End-to-end invocation: resolve, gate, validate, handle.

Tests cover:
- Blocked tools never reach the gateway
- Validation failures never reach the gateway
- Unknown tools raise, everything else becomes an envelope
- 404-as-absence and stop-timer scenarios
"""

import asyncio
import json

import pytest

from core.errors import ToolNotFoundError, UpstreamError
from tools import Dispatcher, AccessGate
from infra.logging import get_call_id

from conftest import RecordingGateway


def run(coro):
    return asyncio.run(coro)


def payload(result):
    return json.loads(result.text)


class TestAccessGate:
    """Readonly mode at dispatch time."""

    def test_blocked_delete_has_no_side_effect(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway, restricted=True)

        result = run(dispatcher.invoke("everhour_delete_project", {"id": "p1"}))

        assert result.is_error
        assert "everhour_delete_project" in result.text
        assert "DELETE" in result.text
        assert "projects" in result.text
        assert gateway.calls == []

    def test_blocked_envelope_is_the_denial_message(self, make_dispatcher, gateway, registry):
        dispatcher = make_dispatcher(gateway, restricted=True)
        descriptor = registry.resolve("everhour_create_client")

        result = run(dispatcher.invoke("everhour_create_client", {"name": "Acme"}))

        assert result.to_dict() == {
            "content": [{
                "type": "text",
                "text": AccessGate(restricted=True).denial_message(descriptor.name, descriptor),
            }],
            "isError": True,
        }

    def test_blocked_before_validation(self, make_dispatcher, gateway):
        """Invalid arguments to a blocked tool still get the denial."""
        dispatcher = make_dispatcher(gateway, restricted=True)

        result = run(dispatcher.invoke("everhour_create_project", {}))

        assert result.is_error
        assert "READONLY MODE" in result.text
        assert gateway.calls == []

    def test_read_allowed_in_restricted_mode(self, make_dispatcher):
        gateway = RecordingGateway({"list_projects": [{"id": "p1", "time": 90}]})
        dispatcher = make_dispatcher(gateway, restricted=True)

        result = run(dispatcher.invoke("everhour_list_projects", {"status": "active"}))

        assert not result.is_error
        assert gateway.calls == [("list_projects", ({"status": "active"},), {})]
        body = payload(result)
        assert body["total"] == 1
        assert body["projects"][0]["timeFormatted"] == "1m 30s"

    def test_unrestricted_allows_delete(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway, restricted=False)

        result = run(dispatcher.invoke("everhour_delete_project", {"id": "p1"}))

        assert not result.is_error
        assert gateway.call_names == ["delete_project"]


class TestValidation:
    """Argument contract violations."""

    def test_missing_required_field(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_create_project", {}))

        assert result.is_error
        assert "name: Field required" in result.text
        assert gateway.calls == []

    def test_unknown_argument(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_get_project", {"id": "p1", "bogus": 1}))

        assert result.is_error
        assert "bogus" in result.text
        assert gateway.calls == []

    def test_bad_date(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke(
            "everhour_create_time_record", {"time": "1h", "date": "15/01/2024"}
        ))

        assert result.is_error
        assert "date" in result.text
        assert gateway.calls == []

    def test_wrong_enum_value(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_list_projects", {"status": "deleted"}))

        assert result.is_error
        assert "status" in result.text

    def test_missing_arguments_for_no_arg_tool(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_get_current_timer", None))

        assert not result.is_error
        assert gateway.call_names == ["get_current_timer"]


class TestFailures:
    """Failures inside handlers become envelopes."""

    def test_unknown_tool_raises(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)

        with pytest.raises(ToolNotFoundError):
            run(dispatcher.invoke("everhour_launch_rocket", {}))

    def test_upstream_error_envelope(self, make_dispatcher):
        gateway = RecordingGateway({
            "get_project": UpstreamError("Project not found", "NOT_FOUND", status_code=404),
        })
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_get_project", {"id": "p1"}))

        assert result.is_error
        assert result.text == (
            'Error executing tool "everhour_get_project": '
            "Everhour API Error: Project not found (NOT_FOUND)"
        )

    def test_unexpected_exception_envelope(self, make_dispatcher):
        gateway = RecordingGateway({"list_clients": RuntimeError("kaboom")})
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_list_clients", {}))

        assert result.is_error
        assert "kaboom" in result.text

    def test_bad_duration_text(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke(
            "everhour_create_time_record", {"time": "soon", "date": "2024-01-15"}
        ))

        assert result.is_error
        assert "Invalid time format" in result.text
        assert gateway.calls == []

    def test_envelope_never_empty(self, make_dispatcher):
        gateway = RecordingGateway({"list_clients": RuntimeError()})
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_list_clients", {}))

        assert result.is_error
        assert "RuntimeError" in result.text

    def test_call_context_is_scoped(self, make_dispatcher, gateway):
        dispatcher = make_dispatcher(gateway)
        run(dispatcher.invoke("everhour_get_current_timer", {}, call_id="call_test"))
        assert get_call_id() is None


class TestTimerScenarios:
    """Timer behavior through the real client."""

    def test_no_current_timer_is_not_an_error(self, client, fake_api, registry):
        dispatcher = Dispatcher(registry, AccessGate(restricted=False), client)

        result = run(dispatcher.invoke("everhour_get_current_timer", {}))

        assert not result.is_error
        assert payload(result)["timer"] is None

    def test_stop_without_running_timer(self, client, fake_api, registry):
        dispatcher = Dispatcher(registry, AccessGate(restricted=False), client)

        result = run(dispatcher.invoke("everhour_stop_timer", {}))

        assert result.is_error
        assert "No active timer" in result.text
        assert fake_api.sent("POST") == []

    def test_stop_running_timer(self, client, fake_api, registry):
        fake_api.add("GET", "/timers/current", json={"id": 5, "status": "active"})
        fake_api.add("POST", "/timers/5/stop", json={"id": 77, "time": 5400})
        dispatcher = Dispatcher(registry, AccessGate(restricted=False), client)

        result = run(dispatcher.invoke("everhour_stop_timer", {}))

        assert not result.is_error
        body = payload(result)
        assert body["timeRecord"]["timeFormatted"] == "1h 30m 0s"

    def test_start_while_running_is_soft_error(self, make_dispatcher):
        gateway = RecordingGateway({
            "get_current_timer": {"id": 1, "status": "active", "duration": 60},
        })
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_start_timer", {"task": "t1"}))

        assert result.is_error
        assert "already running" in result.text
        assert gateway.call_names == ["get_current_timer"]

    def test_start_for_task_when_idle(self, make_dispatcher):
        gateway = RecordingGateway({
            "start_timer_for_task": {"id": 2, "task": {"name": "Write docs"}},
        })
        dispatcher = make_dispatcher(gateway)

        result = run(dispatcher.invoke("everhour_start_timer_for_task", {"taskId": "t1"}))

        assert not result.is_error
        assert gateway.call_names == ["get_current_timer", "start_timer_for_task"]
        assert 'for task "Write docs"' in payload(result)["message"]
