# Tools module - Tool registry, access gate and dispatch
# Each tool: name, pydantic argument model, operation type, async handler
# Every invocation goes through the Dispatcher

from .registry import ToolRegistry, ToolDescriptor, ToolArgs, OperationType
from .authority import AccessGate, AccessDecision
from .executor import Dispatcher
from .results import ToolResult
from .catalog import GROUPS, build_registry

__all__ = [
    "ToolRegistry",
    "ToolDescriptor",
    "ToolArgs",
    "OperationType",
    "AccessGate",
    "AccessDecision",
    "Dispatcher",
    "ToolResult",
    "GROUPS",
    "build_registry",
]
