"""
Tool Dispatcher
---------------
Runs one tool invocation end to end.

Order, for every call:
1. Resolve the descriptor (unknown name raises ToolNotFoundError,
   the only failure that escapes as an exception)
2. Access gate (blocked -> error envelope, handler never runs)
3. Argument validation (invalid -> error envelope, handler never runs)
4. Handler (any failure -> error envelope)

Every invocation runs inside a CallContext so its log records share
one call_id.
"""

from typing import Any, Mapping, Optional
import logging
import time

from core.errors import EverhourError, log_level_for
from infra.logging import CallContext
from .authority import AccessGate
from .registry import ToolRegistry
from .results import ToolResult, error_result


class Dispatcher:
    """
    Entry point for tool execution.

    Holds only immutable collaborators, so concurrent invocations are
    independent of each other.
    """

    def __init__(self, registry: ToolRegistry, gate: AccessGate, gateway: Any):
        self.registry = registry
        self.gate = gate
        self.gateway = gateway
        self._logger = logging.getLogger("everhour.tools.dispatcher")

    async def invoke(
        self,
        name: str,
        raw_args: Optional[Mapping[str, Any]] = None,
        call_id: Optional[str] = None
    ) -> ToolResult:
        """
        Invoke a tool by name.

        Raises ToolNotFoundError for unknown names; every other failure
        is returned as an envelope with is_error set.
        """
        with CallContext(call_id):
            descriptor = self.registry.resolve(name)
            extra = {
                "tool_name": name,
                "operation_type": descriptor.operation_type.value,
            }

            decision = self.gate.check(descriptor)
            if not decision.allowed:
                return error_result(decision.to_error().message)

            try:
                args = descriptor.validate(raw_args)
            except EverhourError as e:
                self._logger.warning(e.message, extra=extra)
                return error_result(e.message)

            start = time.perf_counter()
            try:
                result = await descriptor.handler(self.gateway, args)
            except Exception as e:
                duration_ms = (time.perf_counter() - start) * 1000
                message = e.message if isinstance(e, EverhourError) else str(e) or type(e).__name__
                self._logger.log(
                    log_level_for(e),
                    f"Tool {name} failed: {message}",
                    exc_info=not isinstance(e, EverhourError),
                    extra={**extra, "duration_ms": round(duration_ms, 1)},
                )
                return error_result(f'Error executing tool "{name}": {message}')

            duration_ms = (time.perf_counter() - start) * 1000
            self._logger.info(
                f"Executed {name} in {duration_ms:.0f}ms"
                + (" (soft error)" if result.is_error else ""),
                extra={**extra, "duration_ms": round(duration_ms, 1)},
            )
            return result
