"""
Tool Catalog
------------
The fixed set of descriptor groups served by this adapter, in merge
order. Names are unique across groups; build_registry() still applies
the registry's later-wins rule if that ever changes.
"""

from typing import Dict, List

from . import (
    clients,
    expenses,
    invoices,
    projects,
    sections,
    task_extensions,
    tasks,
    time_records,
    timecards,
    timers,
    users,
)
from .registry import ToolDescriptor, ToolRegistry


GROUPS: List[Dict[str, ToolDescriptor]] = [
    projects.TOOLS,
    tasks.TOOLS,
    task_extensions.TOOLS,
    time_records.TOOLS,
    timers.TOOLS,
    clients.TOOLS,
    sections.TOOLS,
    users.TOOLS,
    timecards.TOOLS,
    invoices.TOOLS,
    expenses.TOOLS,
]


def build_registry() -> ToolRegistry:
    """Registry with every Everhour tool."""
    return ToolRegistry.from_groups(GROUPS)
