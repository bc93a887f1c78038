"""
Tool Registry Tests
-------------------
Descriptor model, group merging, discovery and argument validation.
"""

import logging
from typing import Optional

import pytest
from pydantic import Field

from core.errors import ToolNotFoundError, ValidationError
from tools import GROUPS, OperationType, ToolRegistry
from tools.registry import NoArgs, ToolArgs, descriptor_group, tool
from tools.results import text_result


class EchoArgs(ToolArgs):
    project_id: str = Field(description="Project ID")
    limit: int = Field(10, ge=1)
    note: Optional[str] = None


def make_tool(name, operation=OperationType.READ, reply="ok", **kwargs):
    @tool(name, f"{name} description", EchoArgs, operation, ["projects"], **kwargs)
    async def handler(gateway, args):
        return text_result(reply)
    return handler


class TestCatalog:
    """The shipped tool catalog."""

    def test_names_unique_across_groups(self, registry):
        assert len(registry) == sum(len(group) for group in GROUPS)

    def test_names_prefixed(self, registry):
        assert all(name.startswith("everhour_") for name in registry.names)

    def test_spec_tools_present(self, registry):
        for name in [
            "everhour_list_projects",
            "everhour_delete_project",
            "everhour_get_current_timer",
            "everhour_stop_timer",
            "everhour_add_time_to_task",
            "everhour_list_team_users",
            "everhour_list_all_sections",
            "everhour_clock_in",
            "everhour_update_invoice_status",
            "everhour_list_expense_categories",
        ]:
            assert name in registry

    def test_readonly_flag_matches_classification(self, registry):
        """Catalog tools never disagree between the two flags."""
        for descriptor in registry:
            assert descriptor.readonly == (descriptor.operation_type is OperationType.READ)

    def test_delete_tools_classified(self, registry):
        for descriptor in registry:
            if "_delete_" in descriptor.name:
                assert descriptor.operation_type is OperationType.DELETE

    def test_every_tool_declares_resources(self, registry):
        assert all(descriptor.affected_resources for descriptor in registry)

    def test_merge_order(self, registry):
        assert registry.names[0] == "everhour_list_projects"
        assert registry.names[-1] == "everhour_delete_expense"


class TestDiscovery:
    """list_tools() output."""

    def test_entry_shape(self, registry):
        for entry in registry.list_tools():
            assert set(entry) == {"name", "description", "inputSchema"}
            assert entry["inputSchema"]["type"] == "object"
            assert "properties" in entry["inputSchema"]

    def test_required_and_closed_schema(self, registry):
        schema = registry.resolve("everhour_create_project").input_schema
        assert schema["required"] == ["name"]
        assert schema["additionalProperties"] is False

    def test_camel_case_argument_names(self, registry):
        properties = registry.resolve("everhour_get_tasks_for_project").input_schema["properties"]
        assert "projectId" in properties
        assert "project_id" not in properties

    def test_from_argument_name(self, registry):
        properties = registry.resolve("everhour_list_time_records").input_schema["properties"]
        assert "from" in properties
        assert "to" in properties

    def test_no_argument_tool(self, registry):
        schema = registry.resolve("everhour_get_current_timer").input_schema
        assert schema["properties"] == {}


class TestMerging:
    """Building a registry from groups."""

    def test_later_group_wins(self, caplog):
        first = make_tool("everhour_echo", reply="first")
        second = make_tool("everhour_echo", reply="second")

        with caplog.at_level(logging.WARNING, logger="everhour.tools.registry"):
            registry = ToolRegistry.from_groups([
                descriptor_group(first),
                descriptor_group(second),
            ])

        assert len(registry) == 1
        assert registry.resolve("everhour_echo") is second
        assert "Overwriting existing tool: everhour_echo" in caplog.text

    def test_duplicate_within_group_rejected(self):
        with pytest.raises(ValueError):
            descriptor_group(make_tool("everhour_echo"), make_tool("everhour_echo"))

    def test_resolve_unknown(self):
        registry = ToolRegistry.from_groups([descriptor_group(make_tool("everhour_echo"))])

        with pytest.raises(ToolNotFoundError) as exc_info:
            registry.resolve("everhour_nope")
        assert exc_info.value.message == 'Tool "everhour_nope" not found'
        assert registry.get("everhour_nope") is None


class TestDescriptor:
    """Per-descriptor validation."""

    def test_readonly_defaults_from_operation(self):
        assert make_tool("everhour_a", OperationType.READ).readonly is True
        assert make_tool("everhour_b", OperationType.WRITE).readonly is False

    def test_readonly_override(self):
        assert make_tool("everhour_c", OperationType.READ, readonly=False).readonly is False

    def test_valid_arguments(self):
        args = make_tool("everhour_echo").validate({"projectId": "p1"})
        assert args.project_id == "p1"
        assert args.limit == 10

    def test_to_params_uses_wire_names(self):
        args = make_tool("everhour_echo").validate({"projectId": "p1", "limit": 3})
        assert args.to_params() == {"projectId": "p1", "limit": 3}
        assert args.to_params(exclude={"project_id"}) == {"limit": 3}

    def test_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            make_tool("everhour_echo").validate({})

        assert exc_info.value.problems == ["projectId: Field required"]
        assert exc_info.value.tool_name == "everhour_echo"

    def test_every_violation_listed(self):
        with pytest.raises(ValidationError) as exc_info:
            make_tool("everhour_echo").validate({"limit": 0, "extra": True})

        fields = [problem.split(":")[0] for problem in exc_info.value.problems]
        assert sorted(fields) == ["extra", "limit", "projectId"]

    def test_none_means_no_arguments(self):
        @tool("everhour_noop", "No-op", NoArgs, OperationType.READ, ["timers"])
        async def noop(gateway, args):
            return text_result("ok")

        assert isinstance(noop.validate(None), NoArgs)
