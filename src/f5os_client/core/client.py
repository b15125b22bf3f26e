"""
F5OS Client - Transport and Request Dispatcher

This module provides the HTTP transport primitive and the dispatcher that
wraps it with retries, transparent re-authentication and RESTCONF error
envelope decoding.
"""

import json
import logging
import ssl
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

import certifi
import httpx
from pydantic import ValidationError as PydanticValidationError

from .exceptions import (
    DecodeError,
    DeviceError,
    ReauthenticationRequired,
    TransientError,
    TransportError,
    ValidationError,
)
from .models import ErrorEnvelope, RestconfErrorBody
from .retry import RetryConfig, retry_with_backoff

logger = logging.getLogger("f5os-client")

CONTENT_TYPE = "application/yang-data+json"
SUCCESS_STATUSES = frozenset({200, 201, 204, 404})
SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")
SENSITIVE_HEADERS = ("authorization", "x-auth-token")


class RequestResponseLogger:
    """Logs API requests and responses with sensitive header redaction."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict] = None,
        data: Any = None,
        operation: str = "unknown"
    ):
        """Log API request details with the auth headers redacted."""
        safe_headers = {}
        if headers:
            for key, value in headers.items():
                if key.lower() in SENSITIVE_HEADERS:
                    safe_headers[key] = '[REDACTED]'
                else:
                    safe_headers[key] = value

        log_data = {
            "operation": operation,
            "request": {
                "method": method,
                "url": url,
                "headers": safe_headers,
                "has_data": bool(data)
            }
        }

        self.logger.debug(f"API Request: {json.dumps(log_data)}")

    def log_response(
        self,
        status_code: int,
        response_size: Optional[int] = None,
        duration_ms: Optional[float] = None,
        operation: str = "unknown",
        error: Optional[Exception] = None
    ):
        """Log API response status, size and duration."""
        log_data = {
            "operation": operation,
            "response": {
                "status_code": status_code,
                "response_size": response_size,
                "duration_ms": duration_ms,
                "success": status_code in SUCCESS_STATUSES,
                "has_error": bool(error)
            }
        }

        if error:
            log_data["error"] = str(error)

        level = logging.DEBUG if log_data["response"]["success"] else logging.WARNING
        self.logger.log(level, f"API Response: {json.dumps(log_data)}")


@dataclass(frozen=True)
class RequestPolicy:
    """Retry budget and error decoder used for one dispatched request."""

    retry: RetryConfig = field(default_factory=RetryConfig)
    envelope: ErrorEnvelope = ErrorEnvelope.STANDARD


DEFAULT_POLICY = RequestPolicy()
TENANT_POLICY = RequestPolicy(retry=RetryConfig(max_attempts=1), envelope=ErrorEnvelope.TENANT)


def decode_device_error(envelope: ErrorEnvelope, response: httpx.Response) -> DeviceError:
    """Turn a failing response into a DeviceError using the chosen envelope.

    STANDARD uses the first ``error-message`` of the RESTCONF envelope and
    falls back to the HTTP status. TENANT wraps status line, message and the
    raw body into a JSON document.
    """
    text = response.text
    status_line = f"{response.status_code} {response.reason_phrase}".strip()

    raw: Any = None
    entry = None
    try:
        raw = json.loads(text) if text else None
        if isinstance(raw, dict):
            entry = RestconfErrorBody.model_validate(raw).first()
    except (ValueError, PydanticValidationError):
        entry = None

    error_message = entry.error_message if entry else None
    if envelope is ErrorEnvelope.TENANT:
        message = json.dumps({
            "status": status_line,
            "message": error_message or "",
            "details": raw if raw is not None else text,
        })
    else:
        message = error_message or f"HTTP {response.status_code}: {response.reason_phrase}"

    return DeviceError(
        message,
        status_code=response.status_code,
        response_text=text,
        error_tag=entry.error_tag if entry else None,
        error_path=entry.error_path if entry else None,
        context={"status_code": response.status_code, "url": str(response.request.url)},
    )


def build_ssl_context(verify_ssl: bool, log: logging.Logger = logger) -> ssl.SSLContext | bool:
    """Create the TLS verification policy for the transport.

    With verification enabled the certifi CA bundle is used and TLS 1.2+
    is enforced. Disabling verification logs a warning and returns False.
    """
    if not verify_ssl:
        log.warning(
            "SSL certificate verification is disabled for the F5OS connection. "
            "Only use this against lab devices with self-signed certificates."
        )
        return False

    context = ssl.create_default_context(cafile=certifi.where())
    context.check_hostname = True
    context.verify_mode = ssl.CERT_REQUIRED
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    log.debug("SSL verification enabled with TLS 1.2+ enforcement")
    return context


class F5OSClient:
    """HTTP transport and request dispatcher bound to one device.

    The client owns the token attached to every request. When a request is
    rejected with 401 the registered re-authenticator is asked for a fresh
    token before the next attempt.
    """

    def __init__(
        self,
        host: str,
        uri_root: str,
        verify_ssl: bool = True,
        timeout: float = 60.0,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the F5OS transport.

        Args:
            host: Normalized base URL (scheme, host and optional port)
            uri_root: API root prefix, ``/restconf/data`` or ``/api/data``
            verify_ssl: Whether to verify the device certificate
            timeout: Per-call timeout in seconds
            logger: Logger for request/response logging
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.host = host.rstrip("/")
        self.uri_root = uri_root
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.logger = logger or logging.getLogger("f5os-client")
        self.request_logger = RequestResponseLogger(self.logger)
        self.token: Optional[str] = None
        self.reauthenticator: Optional[Callable[[Optional[str]], Awaitable[None]]] = None

        self.http = httpx.AsyncClient(
            verify=build_ssl_context(verify_ssl, self.logger),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def url_for(self, path: str) -> str:
        """Absolute URL for an API path below the root prefix."""
        return f"{self.host}{self.uri_root}{path}"

    async def close(self):
        """Close the httpx client."""
        await self.http.aclose()

    async def send(
        self,
        method: str,
        url: str,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[httpx.Auth] = None,
        files: Any = None,
        operation: str = "api_request",
    ) -> httpx.Response:
        """Send a single HTTP request.

        Raises:
            TransientError: On timeout-class failures
            TransportError: On any other network failure
        """
        self.request_logger.log_request(method, url, headers, content, operation)
        start_time = datetime.utcnow()
        try:
            response = await self.http.request(
                method, url, content=content, headers=headers, auth=auth, files=files
            )
        except httpx.TimeoutException as e:
            duration_ms = (datetime.utcnow() - start_time).total_seconds() * 1000
            self.request_logger.log_response(0, 0, duration_ms, operation, e)
            raise TransientError(
                f"Request timed out after {self.timeout}s",
                context={"timeout": self.timeout, "url": url},
            ) from e
        except httpx.RequestError as e:
            duration_ms = (datetime.utcnow() - start_time).total_seconds() * 1000
            self.request_logger.log_response(0, 0, duration_ms, operation, e)
            raise TransportError(
                f"Network error talking to {self.host}: {e!s}",
                context={"url": url, "error": str(e)},
            ) from e

        duration_ms = (datetime.utcnow() - start_time).total_seconds() * 1000
        self.request_logger.log_response(
            response.status_code, len(response.content), duration_ms, operation
        )
        return response

    async def request(
        self,
        method: str,
        path: str,
        data: Any = None,
        policy: RequestPolicy = DEFAULT_POLICY,
        operation: str = "api_request",
    ) -> bytes:
        """Dispatch a request to the device API.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: API path below the root prefix
            data: Payload; dicts and lists are JSON encoded, bytes sent as-is
            policy: Retry budget and error envelope decoder
            operation: Name of operation for logging/error context

        Returns:
            Raw response body. A 404 is returned as a successful, possibly
            empty body.

        Raises:
            ValidationError: For an invalid method or path
            DeviceError: If the device still reports an error on the final attempt
            TransientError: If every attempt timed out
            TransportError: For non-timeout network failures
        """
        if not method or not path:
            raise ValidationError("Method and path are required",
                                  context={"method": method, "path": path})
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValidationError(f"Unsupported HTTP method: {method}",
                                  context={"method": method})

        url = self.url_for(path)
        if data is None or isinstance(data, (bytes, bytearray)):
            content = data
        else:
            content = json.dumps(data).encode()
        max_attempts = policy.retry.max_attempts

        async def _attempt(attempt: int) -> bytes:
            token = self.token
            headers = {"X-Auth-Token": token or "", "Content-Type": CONTENT_TYPE}
            response = await self.send(method, url, content=content, headers=headers, operation=operation)
            status = response.status_code
            final = attempt == max_attempts - 1

            if status in SUCCESS_STATUSES:
                return response.content
            if status == 401 and not final:
                raise ReauthenticationRequired(
                    "Session token rejected by device",
                    stale_token=token,
                    context={"url": url},
                )
            if status >= 400:
                if final:
                    raise decode_device_error(policy.envelope, response)
                raise TransientError(f"HTTP {status} from device", context={"status_code": status, "url": url})
            if final:
                return response.content
            raise TransientError(f"Unexpected HTTP {status} from device", context={"status_code": status, "url": url})

        async def _before_retry(error: Exception, attempt: int):
            if isinstance(error, ReauthenticationRequired) and self.reauthenticator is not None:
                self.logger.info(f"Re-authenticating after 401 on {method} {path}")
                await self.reauthenticator(error.stale_token)

        return await retry_with_backoff(
            _attempt, retry_config=policy.retry, on_retry=_before_retry, retry_logger=self.logger
        )

    async def request_json(
        self,
        method: str,
        path: str,
        data: Any = None,
        policy: RequestPolicy = DEFAULT_POLICY,
        operation: str = "api_request",
    ) -> Any:
        """Dispatch a request and decode the JSON body.

        An empty body decodes to an empty dict.

        Raises:
            DecodeError: If the body is not valid JSON
        """
        body = await self.request(method, path, data, policy=policy, operation=operation)
        return decode_json(body, path)

    async def upload(self, path: str, files: Any, upload_id: str, operation: str = "upload") -> bytes:
        """POST a multipart form upload authenticated with the session token."""
        headers = {"X-Auth-Token": self.token or "", "File-Upload-Id": upload_id}
        response = await self.send("POST", self.url_for(path), headers=headers, files=files, operation=operation)
        if response.status_code >= 400:
            raise decode_device_error(ErrorEnvelope.STANDARD, response)
        return response.content


def decode_json(body: bytes, source: str = "response") -> Any:
    """Decode a JSON body, mapping malformed input to DecodeError."""
    if not body or not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError as e:
        raise DecodeError(
            f"Invalid JSON response from {source}: {e!s}",
            context={"source": source},
        ) from e
