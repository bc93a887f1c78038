# Core module - Error taxonomy and time notation
# Every failure below the dispatcher is an EverhourError

from .errors import (
    EverhourError, ErrorCategory,
    ConfigurationError, ToolNotFoundError, ValidationError, AccessDeniedError,
    UpstreamError, TransportError, NoActiveTimerError, FormatError,
    FeatureUnavailableError,
)
from .timecodec import format_duration, parse_duration

__all__ = [
    "EverhourError", "ErrorCategory",
    "ConfigurationError", "ToolNotFoundError", "ValidationError", "AccessDeniedError",
    "UpstreamError", "TransportError", "NoActiveTimerError", "FormatError",
    "FeatureUnavailableError",
    "format_duration", "parse_duration",
]
