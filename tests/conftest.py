"""
Everhour MCP Test Configuration
-------------------------------
Shared fixtures and fakes for all tests.

No test touches the network: HTTP goes through httpx.MockTransport,
and tool-level tests use a recording fake gateway.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from api.client import EverhourClient
from infra.config import Settings
from tools import AccessGate, Dispatcher, build_registry


# =============================================================================
# Fakes
# =============================================================================

class RecordingGateway:
    """
    Stand-in for EverhourClient that records every call.

    Any method name is accepted. The canned value for a method comes
    from `responses`; an exception instance there is raised instead.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.calls: List[Tuple[str, tuple, dict]] = []
        self.responses: Dict[str, Any] = dict(responses or {})

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        async def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            value = self.responses.get(name)
            if isinstance(value, BaseException):
                raise value
            return value

        return method

    @property
    def call_names(self) -> List[str]:
        return [name for name, _, _ in self.calls]


class FakeEverhourAPI:
    """
    Route table behind an httpx.MockTransport.

    Unrouted requests get Everhour's 404 error body.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        text: Optional[str] = None
    ) -> None:
        self.routes[(method, path)] = (status, json, text)

    def fail_with(self, exc_type: type, message: str = "failed") -> None:
        """Every request raises exc_type, as if no response arrived."""
        self.routes["*"] = (exc_type, message)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if "*" in self.routes:
            exc_type, message = self.routes["*"]
            raise exc_type(message, request=request)

        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found", "code": "NOT_FOUND"})

        status, body, text = route
        if text is not None:
            return httpx.Response(status, text=text)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def sent(self, method: Optional[str] = None) -> List[str]:
        """'METHOD /path' for every request, optionally for one method."""
        return [
            f"{r.method} {r.url.path}" for r in self.requests
            if method is None or r.method == method
        ]

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


@pytest.fixture
def fake_api() -> FakeEverhourAPI:
    return FakeEverhourAPI()


@pytest.fixture
def client(settings, fake_api) -> EverhourClient:
    """Gateway on the current path table, talking to fake_api."""
    return EverhourClient.from_settings(settings, transport=fake_api.transport)


@pytest.fixture
def legacy_client(fake_api) -> EverhourClient:
    """Gateway on the legacy path table, talking to fake_api."""
    return EverhourClient.from_settings(
        Settings(api_key="test-key", api_version="legacy"),
        transport=fake_api.transport,
    )


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture(scope="session")
def registry():
    return build_registry()


@pytest.fixture
def make_dispatcher(registry):
    """Build a Dispatcher over the full catalog."""
    def _make(gateway, restricted: bool = False) -> Dispatcher:
        return Dispatcher(registry, AccessGate(restricted=restricted), gateway)
    return _make
