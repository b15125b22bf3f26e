"""
F5OS Client - Exception Hierarchy

This module contains all custom exceptions raised by the F5OS session,
request dispatcher and long-running operation poller.
"""

from datetime import datetime
from typing import Any


class F5OSError(Exception):
    """Base exception for all F5OS-related errors with enhanced context."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.timestamp = datetime.utcnow()

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class ConfigurationError(F5OSError):
    """Client not configured or invalid configuration."""


class ValidationError(F5OSError):
    """Input parameter validation failed."""


class AuthenticationError(F5OSError):
    """Login was rejected by the device."""

    def __init__(
        self,
        message: str,
        status: str | None = None,
        response_text: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.status = status
        self.response_text = response_text


class LoginChallengeError(AuthenticationError):
    """Login answered with an HTML/JS page instead of the RESTCONF API."""


class TransportError(F5OSError):
    """Network-level failure (DNS, connection refused, I/O). Not retried."""


class TransientError(F5OSError):
    """Timeout-class failure or mid-sequence 401. Retried automatically."""


class ReauthenticationRequired(TransientError):
    """The device rejected the session token; a fresh login is needed."""

    def __init__(self, message: str, stale_token: str | None = None, context: dict[str, Any] | None = None):
        super().__init__(message, context=context)
        self.stale_token = stale_token


class DeviceError(F5OSError):
    """HTTP error status reported by the device."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
        error_tag: str | None = None,
        error_path: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.status_code = status_code
        self.response_text = response_text
        self.error_tag = error_tag
        self.error_path = error_path


class DecodeError(F5OSError):
    """JSON response did not match the expected shape."""


class TimedOutError(F5OSError):
    """A poll loop exceeded its deadline without reaching a terminal state."""


class PollFailureError(F5OSError):
    """A poll loop observed an explicit failure status from the device."""

    def __init__(self, status: str, context: dict[str, Any] | None = None):
        super().__init__(status, context=context)
        self.status = status


class OperationCancelledError(F5OSError):
    """A poll loop was interrupted by its cancellation signal."""
