"""
Error Handling Module
---------------------
Typed errors with classification for the Everhour tool adapter.

Every failure below the dispatcher is one of these. Only
ConfigurationError may abort the process; everything else is turned
into an error envelope (or, for unknown tools, a protocol error).
"""

from enum import Enum, auto
from typing import Any, Dict, List, Optional
import logging


class ErrorCategory(Enum):
    """Categories of errors for handling decisions."""
    CONFIGURATION_ERROR = auto()  # Missing/invalid settings, fatal
    TOOL_NOT_FOUND = auto()       # Unknown tool name, protocol-level
    VALIDATION_ERROR = auto()     # Bad arguments
    ACCESS_DENIED = auto()        # Blocked by readonly mode
    UPSTREAM_ERROR = auto()       # Everhour answered with non-2xx
    TRANSPORT_ERROR = auto()      # Everhour could not be reached
    DOMAIN_ERROR = auto()         # No active timer, bad duration text
    UNAVAILABLE = auto()          # Upstream has no such endpoint
    SYSTEM_ERROR = auto()         # Anything unexpected


# Log level per category
LOG_LEVELS: Dict[ErrorCategory, int] = {
    ErrorCategory.CONFIGURATION_ERROR: logging.CRITICAL,
    ErrorCategory.TOOL_NOT_FOUND: logging.WARNING,
    ErrorCategory.VALIDATION_ERROR: logging.WARNING,
    ErrorCategory.ACCESS_DENIED: logging.WARNING,
    ErrorCategory.UPSTREAM_ERROR: logging.ERROR,
    ErrorCategory.TRANSPORT_ERROR: logging.ERROR,
    ErrorCategory.DOMAIN_ERROR: logging.INFO,
    ErrorCategory.UNAVAILABLE: logging.WARNING,
    ErrorCategory.SYSTEM_ERROR: logging.ERROR,
}


class EverhourError(Exception):
    """
    Base class for all adapter errors.

    Carries a category so callers can decide how to log and surface it
    without an isinstance ladder.
    """
    category: ErrorCategory = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.category.name}: {self.message})"


class ConfigurationError(EverhourError):
    """Required configuration is missing or malformed."""
    category = ErrorCategory.CONFIGURATION_ERROR


class ToolNotFoundError(EverhourError):
    """No tool is registered under the requested name."""
    category = ErrorCategory.TOOL_NOT_FOUND

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f'Tool "{tool_name}" not found', {"tool": tool_name})


class ValidationError(EverhourError):
    """Tool arguments violate the tool's input contract."""
    category = ErrorCategory.VALIDATION_ERROR

    def __init__(self, tool_name: str, problems: List[str]):
        self.tool_name = tool_name
        self.problems = list(problems)
        summary = "; ".join(self.problems) or "invalid arguments"
        super().__init__(
            f'Invalid arguments for tool "{tool_name}": {summary}',
            {"tool": tool_name, "problems": self.problems},
        )


class AccessDeniedError(EverhourError):
    """Tool is blocked by the current access mode."""
    category = ErrorCategory.ACCESS_DENIED

    def __init__(self, tool_name: str, message: str):
        self.tool_name = tool_name
        super().__init__(message, {"tool": tool_name})


class UpstreamError(EverhourError):
    """
    Normalized non-2xx response from Everhour.

    Absent fields in the upstream body fall back to the sentinels below.
    """
    category = ErrorCategory.UPSTREAM_ERROR

    DEFAULT_MESSAGE = "Unknown API error"
    DEFAULT_CODE = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 0,
    ):
        self.api_message = message or self.DEFAULT_MESSAGE
        self.code = code or self.DEFAULT_CODE
        self.status_code = status_code
        super().__init__(
            f"Everhour API Error: {self.api_message} ({self.code})",
            details or {},
        )

    @classmethod
    def from_body(cls, body: Any, status_code: int) -> "UpstreamError":
        """Build from a decoded error body of unknown shape."""
        if not isinstance(body, dict):
            body = {}
        details = body.get("details")
        return cls(
            message=body.get("message"),
            code=body.get("code"),
            details=details if isinstance(details, dict) else {},
            status_code=status_code,
        )


class TransportError(EverhourError):
    """No response was received from Everhour."""
    category = ErrorCategory.TRANSPORT_ERROR


class NoActiveTimerError(EverhourError):
    """A timer operation needed a running timer and there is none."""
    category = ErrorCategory.DOMAIN_ERROR

    def __init__(self, message: str = "No active timer found to stop"):
        super().__init__(message)


class FormatError(EverhourError):
    """Duration text could not be parsed."""
    category = ErrorCategory.DOMAIN_ERROR


class FeatureUnavailableError(EverhourError):
    """The Everhour API has no endpoint for this operation."""
    category = ErrorCategory.UNAVAILABLE


def categorize(exception: BaseException) -> ErrorCategory:
    """Map any exception to an error category."""
    if isinstance(exception, EverhourError):
        return exception.category
    return ErrorCategory.SYSTEM_ERROR


def log_level_for(exception: BaseException) -> int:
    """Pick the log level an exception should be reported at."""
    return LOG_LEVELS.get(categorize(exception), logging.ERROR)
