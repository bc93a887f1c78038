"""
Configuration Manager
---------------------
Loads adapter settings once at startup.

Rules:
- Secrets never in code, the API key comes from the environment (or the
  optional YAML file) and is never logged
- YAML file first, environment variables override it
- The result is an immutable Settings value passed explicitly to the
  gateway, access gate and dispatcher
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging
import os

import yaml

from core.errors import ConfigurationError


DEFAULT_BASE_URL = "https://api.everhour.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CONFIG_FILE = "everhour.yaml"

API_VERSIONS = ("current", "legacy")

# Exact string forms that switch readonly mode on
TRUTHY_VALUES = frozenset({"true", "1", "yes"})

# setting name -> environment variable
ENV_VARS: Dict[str, str] = {
    "api_key": "EVERHOUR_API_KEY",
    "base_url": "EVERHOUR_API_BASE_URL",
    "readonly": "EVERHOUR_READONLY_MODE",
    "api_version": "EVERHOUR_API_VERSION",
    "timeout_seconds": "EVERHOUR_TIMEOUT_SECONDS",
    "log_level": "EVERHOUR_LOG_LEVEL",
    "log_dir": "EVERHOUR_LOG_DIR",
}

READONLY_ENV_VAR = ENV_VARS["readonly"]


def is_truthy(value: Any) -> bool:
    """Readonly flag parsing: only "true", "1" and "yes" count."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value) in TRUTHY_VALUES


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, fixed for the process lifetime."""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    readonly: bool = False
    api_version: str = "current"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"Settings(api_key='***', base_url={self.base_url!r}, "
            f"readonly={self.readonly}, api_version={self.api_version!r}, "
            f"timeout_seconds={self.timeout_seconds})"
        )


class ConfigManager:
    """
    Centralized configuration loading.
    Loads configuration from YAML with environment variable overrides.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        self._environ = os.environ if environ is None else environ
        path = config_path or self._environ.get("EVERHOUR_CONFIG") or DEFAULT_CONFIG_FILE
        self._config_path = Path(path)
        self._config: Dict[str, Any] = {}
        self._logger = logging.getLogger("everhour.infra.config")

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file, if there is one."""
        if not self._config_path.exists():
            self._logger.debug(f"Config file not found: {self._config_path}")
            return

        try:
            with open(self._config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self._config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {self._config_path} must contain a mapping")

        # Accept both a flat file and one nested under "everhour:"
        self._config = data.get("everhour", data)
        self._logger.info(f"Loaded config from {self._config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        Environment variables override file config.
        """
        env_value = self._environ.get(ENV_VARS.get(key, f"EVERHOUR_{key.upper()}"))
        if env_value is not None:
            return env_value
        return self._config.get(key, default)

    def load_settings(self) -> Settings:
        """
        Build Settings.

        Raises ConfigurationError if the API key is missing or any value
        is malformed.
        """
        api_key = self.get("api_key")
        if api_key is None or not str(api_key).strip():
            raise ConfigurationError(f"{ENV_VARS['api_key']} environment variable is required")

        api_version = str(self.get("api_version", "current")).strip().lower()
        if api_version not in API_VERSIONS:
            raise ConfigurationError(
                f"Unsupported {ENV_VARS['api_version']}: {api_version!r} "
                f"(expected one of {', '.join(API_VERSIONS)})"
            )

        raw_timeout = self.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        try:
            timeout = float(raw_timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid timeout: {raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {timeout}")

        log_dir = self.get("log_dir")

        return Settings(
            api_key=str(api_key).strip(),
            base_url=str(self.get("base_url") or DEFAULT_BASE_URL),
            readonly=is_truthy(self.get("readonly", False)),
            api_version=api_version,
            timeout_seconds=timeout,
            log_level=str(self.get("log_level", "INFO")).upper(),
            log_dir=str(log_dir) if log_dir else None,
        )


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """Shortcut used by the entrypoint."""
    return ConfigManager(config_path=config_path, environ=environ).load_settings()
