# Infrastructure module - Configuration and Logging

from .config import ConfigManager, Settings, load_settings
from .logging import (
    configure_logging, CallContext,
    get_call_id, generate_call_id
)

__all__ = [
    # Configuration
    "ConfigManager",
    "Settings",
    "load_settings",
    # Logging
    "configure_logging",
    "CallContext",
    "get_call_id",
    "generate_call_id",
]
