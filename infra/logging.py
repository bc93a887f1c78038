"""
Centralized Logging
-------------------
Structured logging with call_id propagation so every record emitted
while a tool runs can be traced back to that invocation.

Design:
- Every tool invocation gets a unique call_id
- call_id propagates through: Dispatcher -> Handler -> Gateway
- Console output goes to stderr via Rich; stdout belongs to the protocol
- Optional JSON-lines file output
- Severity discipline: INFO=state, WARNING=recoverable, ERROR=upstream failure

Usage:
    import logging
    from infra.logging import CallContext

    logger = logging.getLogger("everhour.tools.dispatcher")

    with CallContext() as call_id:
        logger.info("Invoking tool")
"""

import contextvars
import json
import logging
import logging.handlers
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "everhour"

_call_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "call_id", default=None
)


def generate_call_id() -> str:
    """Generate a unique call ID."""
    return f"call_{uuid.uuid4().hex[:12]}"


def get_call_id() -> Optional[str]:
    """Get the current call ID from context."""
    return _call_id_var.get()


class CallContext:
    """
    Context manager for invocation scoping.

    Usage:
        with CallContext() as call_id:
            # All logs within this block carry call_id
            logger.info("Processing...")
    """

    def __init__(self, call_id: Optional[str] = None):
        self._call_id = call_id or generate_call_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = _call_id_var.set(self._call_id)
        return self._call_id

    def __exit__(self, *args) -> None:
        if self._token is not None:
            _call_id_var.reset(self._token)


class CallIdFilter(logging.Filter):
    """Logging filter that adds call_id to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "call_id", None) is None:
            record.call_id = get_call_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logging."""

    EXTRA_FIELDS = ("tool_name", "operation_type", "status_code", "error_code", "duration_ms")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "call_id": getattr(record, "call_id", "-"),
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)

        return json.dumps(entry)


class CallIdFormatter(logging.Formatter):
    """Prefix console messages with the call_id when one is set."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        call_id = getattr(record, "call_id", "-")
        return f"[{call_id}] {message}" if call_id != "-" else message


_logging_initialized = False


def configure_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    console: bool = True,
    force: bool = False,
) -> None:
    """
    Configure the "everhour" logger tree.

    Args:
        level: Logging level name (default INFO)
        log_dir: Directory for the JSON log file; no file output when None
        console: Enable stderr output
        force: Reconfigure even if already configured
    """
    global _logging_initialized

    if _logging_initialized and not force:
        return

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.propagate = False

    call_filter = CallIdFilter()

    if console:
        console_handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
        )
        console_handler.setFormatter(CallIdFormatter("%(message)s"))
        console_handler.addFilter(call_filter)
        root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / "everhour-mcp.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)  # File gets everything
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(call_filter)
        root_logger.addHandler(file_handler)

    _logging_initialized = True
