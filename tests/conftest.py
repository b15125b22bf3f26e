"""
Shared pytest configuration and fixtures for F5OS Client tests.

This module provides common fixtures used across all test modules including:
- F5OS connection configurations
- A mock F5OS device built on httpx.MockTransport
- Authenticated sessions bound to the mock device
- Instant sleeps for retry and poll loops
"""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
import pytest_asyncio

from f5os_client.core.models import F5OSConfig
from f5os_client.core.session import create_session
from f5os_client.shared.constants import LOGIN_PATH, ROOT_URI_API, ROOT_URI_RESTCONF

Reply = Union[Tuple[int, Any], Tuple[int, Any, Dict[str, str]], Callable[[httpx.Request], httpx.Response]]

_real_sleep = asyncio.sleep


# ========== Configuration Fixtures ==========


@pytest.fixture
def f5os_config() -> F5OSConfig:
    """Provide an F5OS configuration for a legacy RESTCONF port."""
    return F5OSConfig(
        host="10.1.1.10",
        username="admin",
        password="test_password_123",
        port=8888,
        verify_ssl=False,  # Disable SSL verification for tests
    )


@pytest.fixture
def f5os_config_dict() -> Dict[str, Any]:
    """Provide a dictionary version of the F5OS configuration."""
    return {
        "host": "10.1.1.10",
        "username": "admin",
        "password": "test_password_123",
        "port": 8888,
        "verify_ssl": False,
    }


# ========== Mock Device ==========


class MockDevice(httpx.MockTransport):
    """Mock F5OS device answering requests by method and API path.

    Routes are registered with :meth:`route`. Each route holds a queue of
    replies; the last reply repeats once the queue is down to one. Unrouted
    GETs answer 404 and unrouted writes 204, both with an empty body.
    """

    def __init__(self, token: str = "token-1"):
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[httpx.Request] = []
        self.tokens = [token]
        super().__init__(self._handle_request)
        self.route("GET", LOGIN_PATH, self._login)

    def route(self, method: str, path: str, *replies: Reply) -> "MockDevice":
        self.routes[(method.upper(), path)] = list(replies)
        return self

    def issue_tokens(self, *tokens: str) -> None:
        """Tokens handed out by successive logins."""
        self.tokens = list(tokens)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or self.api_path(r) == path)
        ]

    def logins(self) -> List[httpx.Request]:
        return self.calls("GET", LOGIN_PATH)

    @staticmethod
    def api_path(request: httpx.Request) -> str:
        path = request.url.raw_path.decode().split("?")[0]
        for root in (ROOT_URI_RESTCONF, ROOT_URI_API):
            if path.startswith(root):
                return path[len(root):]
        return path

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def _login(self, request: httpx.Request) -> httpx.Response:
        token = self.tokens.pop(0) if len(self.tokens) > 1 else self.tokens[0]
        return httpx.Response(200, json={}, headers={"X-Auth-Token": token})

    def _handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        request.read()

        queue = self.routes.get((request.method, self.api_path(request)))
        if not queue:
            return httpx.Response(404 if request.method == "GET" else 204)

        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(reply):
            return reply(request)
        return _build_response(*reply)


def _build_response(status: int, body: Any = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    if body is None:
        return httpx.Response(status, headers=headers)
    if isinstance(body, (str, bytes)):
        return httpx.Response(status, content=body, headers=headers)
    return httpx.Response(status, json=body, headers=headers)


@pytest.fixture
def device() -> MockDevice:
    """Provide a mock F5OS device."""
    return MockDevice()


@pytest_asyncio.fixture
async def session(f5os_config, device):
    """Provide an authenticated session against the mock device."""
    session = await create_session(f5os_config, transport=device)
    yield session
    await session.close()


# ========== Timing ==========


@pytest.fixture(autouse=True)
def instant_sleep(monkeypatch) -> List[float]:
    """Make asyncio.sleep return immediately and record requested delays."""
    delays: List[float] = []

    async def _sleep(delay, result=None):
        delays.append(delay)
        await _real_sleep(0)
        return result

    monkeypatch.setattr(asyncio, "sleep", _sleep)
    return delays


# ========== Config File Isolation ==========


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point the config loader at a temporary directory."""
    from f5os_client.core.config_loader import ConfigLoader

    config_dir = tmp_path / ".f5os-client"
    monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_DIR", config_dir)
    monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_FILE", config_dir / "config.json")
    for name in ("F5OS_HOST", "F5OS_USERNAME", "F5OS_PASSWORD", "F5OS_PORT",
                 "F5OS_VERIFY_SSL", "F5OS_API_TIMEOUT", "F5OS_TEEM_DISABLE"):
        monkeypatch.delenv(name, raising=False)
    return config_dir
