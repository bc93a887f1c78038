"""
Access Gate Tests
-----------------
Readonly-mode authorization.

Tests cover:
- Unrestricted mode allows everything
- Restricted mode allows only READ tools that also declare readonly
- Partition is total and disjoint
- Denial message content
- Startup status summary
"""

import logging

import pytest

from infra.config import Settings
from tools import AccessGate, OperationType, ToolRegistry
from tools.registry import NoArgs, descriptor_group, tool
from tools.results import text_result


def make_tool(name, operation, readonly=None, resources=("projects",)):
    @tool(name, "test tool", NoArgs, operation, resources, readonly=readonly)
    async def handler(gateway, args):
        return text_result("ok")
    return handler


class TestAuthorize:
    """Single-descriptor decisions."""

    @pytest.mark.parametrize("operation", list(OperationType))
    def test_unrestricted_allows_everything(self, operation):
        gate = AccessGate(restricted=False)
        assert gate.authorize(make_tool("everhour_x", operation))

    def test_restricted_allows_read(self):
        gate = AccessGate(restricted=True)
        assert gate.authorize(make_tool("everhour_list_x", OperationType.READ))

    @pytest.mark.parametrize("operation", [OperationType.WRITE, OperationType.DELETE])
    def test_restricted_blocks_mutations(self, operation):
        gate = AccessGate(restricted=True)
        assert not gate.authorize(make_tool("everhour_x", operation))

    def test_read_without_readonly_flag_denied(self):
        """Disagreeing flags are treated as unsafe."""
        gate = AccessGate(restricted=True)
        assert not gate.authorize(make_tool("everhour_x", OperationType.READ, readonly=False))

    def test_write_with_readonly_flag_denied(self):
        gate = AccessGate(restricted=True)
        assert not gate.authorize(make_tool("everhour_x", OperationType.WRITE, readonly=True))

    def test_from_settings(self):
        assert AccessGate.from_settings(Settings(api_key="k", readonly=True)).restricted
        assert not AccessGate.from_settings(Settings(api_key="k")).restricted


class TestPartition:
    """Partition over the full catalog."""

    @pytest.mark.parametrize("restricted", [True, False])
    def test_total_and_disjoint(self, registry, restricted):
        allowed, blocked = AccessGate(restricted=restricted).partition(registry)

        assert allowed | blocked == set(registry.names)
        assert not allowed & blocked

    def test_restricted_correctness(self, registry):
        allowed, blocked = AccessGate(restricted=True).partition(registry)

        for descriptor in registry:
            if descriptor.name in allowed:
                assert descriptor.operation_type is OperationType.READ
            if descriptor.operation_type is not OperationType.READ:
                assert descriptor.name in blocked

    def test_unrestricted_blocks_nothing(self, registry):
        allowed, blocked = AccessGate(restricted=False).partition(registry)
        assert blocked == frozenset()
        assert len(allowed) == len(registry)

    def test_mixed_flags_registry(self):
        registry = ToolRegistry.from_groups([descriptor_group(
            make_tool("everhour_list_a", OperationType.READ),
            make_tool("everhour_sneaky", OperationType.READ, readonly=False),
            make_tool("everhour_create_a", OperationType.WRITE),
        )])

        allowed, blocked = AccessGate(restricted=True).partition(registry)

        assert allowed == {"everhour_list_a"}
        assert blocked == {"everhour_sneaky", "everhour_create_a"}


class TestDenialMessage:
    """Explanation returned for blocked tools."""

    def test_names_tool_operation_and_resources(self):
        gate = AccessGate(restricted=True)
        descriptor = make_tool("everhour_delete_thing", OperationType.DELETE,
                               resources=("tasks", "time_records"))

        message = gate.denial_message(descriptor.name, descriptor)

        assert 'Tool "everhour_delete_thing" is blocked' in message
        assert "DELETE operations on: tasks, time_records" in message
        assert "EVERHOUR_READONLY_MODE=false" in message

    def test_deterministic(self):
        gate = AccessGate(restricted=True)
        descriptor = make_tool("everhour_create_x", OperationType.WRITE)
        assert gate.denial_message("everhour_create_x", descriptor) == \
            gate.denial_message("everhour_create_x", descriptor)

    def test_check_carries_denial(self, caplog):
        gate = AccessGate(restricted=True)
        descriptor = make_tool("everhour_create_x", OperationType.WRITE)

        with caplog.at_level(logging.WARNING, logger="everhour.tools.gate"):
            decision = gate.check(descriptor)

        assert not decision.allowed
        assert decision.reason == gate.denial_message(descriptor.name, descriptor)
        assert decision.to_error().message == decision.reason
        assert "BLOCKED" in caplog.text


class TestStatus:
    """Startup summary."""

    def test_summary_counts(self, registry):
        summary = AccessGate(restricted=True).status_summary(registry)

        assert summary["mode"] == "readonly"
        assert summary["total"] == len(registry)
        assert summary["allowed"] + summary["blocked"] == summary["total"]
        assert "everhour_delete_project" in summary["blocked_tools"]

    def test_full_mode_summary(self, registry):
        summary = AccessGate(restricted=False).status_summary(registry)
        assert summary["mode"] == "full"
        assert summary["blocked"] == 0

    def test_log_status(self, registry, caplog):
        with caplog.at_level(logging.INFO, logger="everhour.tools.gate"):
            AccessGate(restricted=True).log_status(registry)
        assert "READONLY MODE ENABLED" in caplog.text
