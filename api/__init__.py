# API module - Everhour REST gateway
# One method per upstream operation, API key attached to every request

from .client import EverhourClient, APIConfig
from .paths import ApiPaths, paths_for

__all__ = ["EverhourClient", "APIConfig", "ApiPaths", "paths_for"]
