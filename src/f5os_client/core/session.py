"""
F5OS Client - Session Manager

This module owns the authenticated session against one F5OS device: host
normalization, API root selection, login, single-flight re-authentication
and the cached platform classification.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..shared.constants import LOGIN_PATH, ROOT_URI_API, ROOT_URI_RESTCONF
from .client import CONTENT_TYPE, DEFAULT_POLICY, F5OSClient, RequestPolicy
from .exceptions import AuthenticationError, ConfigurationError, LoginChallengeError
from .models import F5OSConfig, PlatformInfo, PlatformKind, RestconfErrorBody
from .platform import detect_platform

logger = logging.getLogger("f5os-client")

LOGIN_CHALLENGE_MARKER = "enable JavaScript to run this app"

TelemetryHook = Callable[["Session"], Any]


def normalize_host(host: str, port: Optional[int] = None) -> tuple[str, str]:
    """Resolve the base URL and API root for a configured host.

    A missing scheme defaults to https. A port already present in the URL
    wins over ``port``; otherwise ``port`` is appended. Port 443 selects
    ``/api/data``, anything else the legacy ``/restconf/data``.

    Returns:
        Tuple of (base_url, uri_root)

    Raises:
        ConfigurationError: If the port in the host URL is not a valid number
    """
    host = host.strip().rstrip("/")
    if "://" not in host:
        host = f"https://{host}"

    try:
        url_port = urlsplit(host).port
    except ValueError as e:
        raise ConfigurationError(f"Invalid port in host '{host}': {e}", context={"host": host}) from e
    if url_port is not None:
        effective = url_port
    elif port is not None:
        host = f"{host}:{port}"
        effective = port
    else:
        effective = None

    uri_root = ROOT_URI_API if effective == 443 else ROOT_URI_RESTCONF
    return host, uri_root


class Session:
    """Authenticated connection to an F5OS device.

    Use :func:`create_session` to build one; it logs in and detects the
    platform before handing the session out.
    """

    def __init__(
        self,
        config: F5OSConfig,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger("f5os-client")
        self.host, self.uri_root = normalize_host(config.host, config.port)
        self.username = config.username
        self._password = config.password
        self.platform = PlatformInfo()
        self.client = F5OSClient(
            self.host,
            self.uri_root,
            verify_ssl=config.verify_ssl,
            timeout=config.api_timeout,
            logger=self.logger,
            transport=transport,
        )
        self.client.reauthenticator = self.reauthenticate
        self._auth_lock = asyncio.Lock()
        self._telemetry_task: Optional[asyncio.Task] = None

    @property
    def token(self) -> Optional[str]:
        return self.client.token

    @property
    def platform_kind(self) -> PlatformKind:
        return self.platform.kind

    @property
    def platform_version(self) -> Optional[str]:
        return self.platform.version

    async def login(self) -> str:
        """Log in with the stored credentials and install the new token.

        Raises:
            AuthenticationError: If the device rejects the credentials
            LoginChallengeError: If the device answers with its web UI page
            TransportError: On network failure
        """
        response = await self.client.send(
            "GET",
            self.client.url_for(LOGIN_PATH),
            headers={"Content-Type": CONTENT_TYPE},
            auth=httpx.BasicAuth(self.username, self._password),
            operation="login",
        )
        status_line = f"{response.status_code} {response.reason_phrase}".strip()

        if response.status_code == 401:
            raise AuthenticationError(
                _login_error_message(response.text) or status_line,
                status=status_line,
                response_text=response.text,
                context={"host": self.host},
            )
        if response.status_code >= 400:
            raise AuthenticationError(
                f"Login failed with HTTP {status_line}",
                status=status_line,
                response_text=response.text,
                context={"host": self.host},
            )
        if LOGIN_CHALLENGE_MARKER in response.text:
            raise LoginChallengeError(
                "Device answered the login with a browser page; check the host and port",
                status=status_line,
                response_text=response.text,
                context={"host": self.host},
            )

        token = response.headers.get("X-Auth-Token")
        if not token:
            raise AuthenticationError(
                "Login response did not carry an X-Auth-Token header",
                status=status_line,
                context={"host": self.host},
            )

        self.client.token = token
        self.logger.info(f"Logged in to {self.host} as {self.username}")
        return token

    async def reauthenticate(self, stale_token: Optional[str] = None) -> None:
        """Replace the token after the device rejected ``stale_token``.

        Concurrent callers holding the same stale token trigger one login;
        later callers see a token that already changed and return.
        """
        async with self._auth_lock:
            if stale_token is not None and self.client.token != stale_token:
                self.logger.debug("Token already refreshed by a concurrent request")
                return
            await self.login()

    async def detect_platform(self) -> PlatformInfo:
        """Classify the device and cache the result on the session."""
        self.platform = await detect_platform(self._fetch, self.logger)
        self.logger.info(
            f"Platform detected: {self.platform.kind.value}"
            + (f" version {self.platform.version}" if self.platform.version else "")
        )
        return self.platform

    async def _fetch(self, path: str) -> tuple[int, bytes]:
        response = await self.client.send(
            "GET",
            self.client.url_for(path),
            headers={"X-Auth-Token": self.client.token or "", "Content-Type": CONTENT_TYPE},
            operation="detect_platform",
        )
        return response.status_code, response.content

    def report_telemetry(self, hook: TelemetryHook) -> None:
        """Run the telemetry hook in the background; failures are logged only."""

        async def _run():
            try:
                result = hook(self)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self.logger.warning(f"Telemetry report failed: {e}")

        self._telemetry_task = asyncio.create_task(_run())

    # ========== Dispatch helpers ==========

    async def request(self, method: str, path: str, data: Any = None,
                      policy: RequestPolicy = DEFAULT_POLICY, operation: str = "api_request") -> bytes:
        return await self.client.request(method, path, data, policy=policy, operation=operation)

    async def request_json(self, method: str, path: str, data: Any = None,
                           policy: RequestPolicy = DEFAULT_POLICY, operation: str = "api_request") -> Any:
        return await self.client.request_json(method, path, data, policy=policy, operation=operation)

    async def get(self, path: str, **kwargs) -> bytes:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, data: Any = None, **kwargs) -> bytes:
        return await self.request("POST", path, data, **kwargs)

    async def put(self, path: str, data: Any = None, **kwargs) -> bytes:
        return await self.request("PUT", path, data, **kwargs)

    async def patch(self, path: str, data: Any = None, **kwargs) -> bytes:
        return await self.request("PATCH", path, data, **kwargs)

    async def delete(self, path: str, **kwargs) -> bytes:
        return await self.request("DELETE", path, **kwargs)

    async def get_json(self, path: str, **kwargs) -> Any:
        return await self.request_json("GET", path, **kwargs)

    async def post_json(self, path: str, data: Any = None, **kwargs) -> Any:
        return await self.request_json("POST", path, data, **kwargs)

    async def put_json(self, path: str, data: Any = None, **kwargs) -> Any:
        return await self.request_json("PUT", path, data, **kwargs)

    async def patch_json(self, path: str, data: Any = None, **kwargs) -> Any:
        return await self.request_json("PATCH", path, data, **kwargs)

    async def upload(self, path: str, files: Any, upload_id: str) -> bytes:
        return await self.client.upload(path, files, upload_id)

    async def close(self):
        """Cancel pending background work and close the transport."""
        if self._telemetry_task is not None and not self._telemetry_task.done():
            self._telemetry_task.cancel()
        await self.client.close()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


def _login_error_message(text: str) -> Optional[str]:
    """Pick the error-tag (or message) out of a 401 login body."""
    try:
        entry = RestconfErrorBody.model_validate(json.loads(text)).first()
    except (ValueError, PydanticValidationError):
        return None
    if entry is None:
        return None
    return entry.error_tag or entry.error_message


async def create_session(
    config: F5OSConfig,
    *,
    logger: Optional[logging.Logger] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    telemetry: Optional[TelemetryHook] = None,
) -> Session:
    """Log in to the device described by ``config`` and return the session.

    Platform detection runs before the session is returned and never fails
    creation. The telemetry hook, when given and not disabled in the
    configuration, is started in the background.

    Raises:
        AuthenticationError: If the login is rejected
        TransportError: If the device cannot be reached
    """
    session = Session(config, logger=logger, transport=transport)
    try:
        await session.login()
    except BaseException:
        await session.close()
        raise

    await session.detect_platform()

    if telemetry is not None and not config.teem_disabled:
        session.report_telemetry(telemetry)
    return session
