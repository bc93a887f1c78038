"""
Access Gate
-----------
Readonly-mode policy for tool execution.

Rules:
- The mode is fixed at construction and never changes afterwards
- Unrestricted: every tool may run
- Restricted: a tool may run only if it is READ-classified AND declares
  itself readonly-safe; disagreement between the two means deny
- Denied invocations never reach the handler, so no upstream call is made
- All denials logged with call_id
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Tuple
import logging

from core.errors import AccessDeniedError
from infra.config import READONLY_ENV_VAR, Settings
from infra.logging import get_call_id
from .registry import OperationType, ToolDescriptor, ToolRegistry


@dataclass
class AccessDecision:
    """
    Result of an access check.

    Denied decisions carry the message shown to the caller.
    """
    tool_name: str
    operation_type: OperationType
    allowed: bool
    reason: str = ""
    call_id: str = "-"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_error(self) -> AccessDeniedError:
        return AccessDeniedError(self.tool_name, self.reason)


class AccessGate:
    """
    Single choke point for readonly-mode authorization.

    Holds one immutable flag; every method is a pure function of that
    flag and the descriptor(s) passed in.
    """

    def __init__(self, restricted: bool = False):
        self._restricted = bool(restricted)
        self._logger = logging.getLogger("everhour.tools.gate")

    @classmethod
    def from_settings(cls, settings: Settings) -> "AccessGate":
        return cls(restricted=settings.readonly)

    @property
    def restricted(self) -> bool:
        return self._restricted

    @property
    def mode(self) -> str:
        return "readonly" if self._restricted else "full"

    def authorize(self, descriptor: ToolDescriptor) -> bool:
        """May this tool execute in the current mode?"""
        if not self._restricted:
            return True
        return descriptor.operation_type is OperationType.READ and descriptor.readonly

    def check(self, descriptor: ToolDescriptor) -> AccessDecision:
        """
        Authorize and log.

        This is the entry point used by the dispatcher.
        """
        allowed = self.authorize(descriptor)
        decision = AccessDecision(
            tool_name=descriptor.name,
            operation_type=descriptor.operation_type,
            allowed=allowed,
            reason="Authorized" if allowed else self.denial_message(descriptor.name, descriptor),
            call_id=get_call_id() or "-",
        )
        self._log_decision(decision)
        return decision

    def partition(self, registry: ToolRegistry) -> Tuple[FrozenSet[str], FrozenSet[str]]:
        """Split every registered name into (allowed, blocked)."""
        allowed = set()
        blocked = set()
        for descriptor in registry:
            (allowed if self.authorize(descriptor) else blocked).add(descriptor.name)
        return frozenset(allowed), frozenset(blocked)

    def denial_message(self, name: str, descriptor: ToolDescriptor) -> str:
        """Explanation shown verbatim when a tool is blocked."""
        resources = ", ".join(sorted(descriptor.affected_resources)) or "unspecified resources"
        return (
            f'🔒 READONLY MODE: Tool "{name}" is blocked.\n\n'
            f"Reason: This tool performs {descriptor.operation_type.value.upper()} "
            f"operations on: {resources}\n"
            f"Current mode: READONLY (only read operations allowed)\n\n"
            f"To enable this tool:\n"
            f"- Set {READONLY_ENV_VAR}=false\n"
            f"- Or remove the environment variable\n\n"
            f"Available readonly tools: Use 'everhour_list_*' and 'everhour_get_*' "
            f"tools for data retrieval."
        )

    def status_summary(self, registry: ToolRegistry) -> Dict[str, Any]:
        allowed, blocked = self.partition(registry)
        return {
            "mode": self.mode,
            "allowed": len(allowed),
            "blocked": len(blocked),
            "total": len(registry),
            "blocked_tools": sorted(blocked),
        }

    def log_status(self, registry: ToolRegistry) -> None:
        """Startup summary of the access mode."""
        summary = self.status_summary(registry)

        if self._restricted:
            self._logger.info("🔒 READONLY MODE ENABLED")
            self._logger.info(
                f"Allowed tools: {summary['allowed']}/{summary['total']} (read operations only)"
            )
            self._logger.info(f"Blocked tools: {summary['blocked']} (write/delete operations)")
            self._logger.info(f"To enable all tools: set {READONLY_ENV_VAR}=false")
        else:
            self._logger.info(f"🔓 FULL ACCESS MODE: all {summary['total']} tools enabled")
            self._logger.info(f"To enable readonly mode: set {READONLY_ENV_VAR}=true")

    def _log_decision(self, decision: AccessDecision) -> None:
        """Log an access decision; denials at WARNING."""
        level = logging.DEBUG if decision.allowed else logging.WARNING

        self._logger.log(
            level,
            f"Access decision: {'ALLOWED' if decision.allowed else 'BLOCKED'} | "
            f"tool={decision.tool_name} | "
            f"operation={decision.operation_type.value} | "
            f"mode={self.mode}",
            extra={
                "tool_name": decision.tool_name,
                "operation_type": decision.operation_type.value,
            },
        )

    def __repr__(self) -> str:
        return f"AccessGate(mode={self.mode})"
