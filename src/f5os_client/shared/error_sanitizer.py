"""
F5OS Client - Error Message Sanitization

This module strips credentials, session tokens and passphrases from error
messages and error context before they are logged or shown to a user.
"""

import json
import logging
import re
from typing import Any

import httpx

from ..core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    DeviceError,
    F5OSError,
    LoginChallengeError,
    OperationCancelledError,
    PollFailureError,
    TimedOutError,
    TransientError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger("f5os-client")


class ErrorMessageSanitizer:
    """Sanitize error messages for safe user display."""

    # Never shown verbatim in user-facing text or logs
    SENSITIVE_PATTERNS = [
        "password",
        "passphrase",
        "salt",
        "token",
        "authorization",
        "credential",
        "secret",
    ]

    @staticmethod
    def sanitize_for_user(error: Exception, operation: str = "operation") -> str:
        """
        Return user-safe error message without sensitive details.

        Args:
            error: The exception to sanitize
            operation: Description of the operation that failed

        Returns:
            User-safe error message
        """
        if isinstance(error, LoginChallengeError):
            return "The device answered with its web UI instead of the API. Check the host and port."

        if isinstance(error, AuthenticationError):
            return "Authentication failed. Please check your F5OS credentials."

        if isinstance(error, ConfigurationError):
            return f"Configuration error: {error.message}"

        if isinstance(error, ValidationError):
            return f"Invalid input: {error.message}"

        if isinstance(error, TimedOutError):
            return f"Timed out waiting for {operation} to finish on the device."

        if isinstance(error, PollFailureError):
            return f"Device reported a failure: {ErrorMessageSanitizer._sanitize_text(error.status)}"

        if isinstance(error, OperationCancelledError):
            return f"{operation} was cancelled."

        if isinstance(error, TransientError):
            return "Request timed out. The F5OS device may be overloaded or unreachable."

        if isinstance(error, TransportError):
            return "Network error. Cannot connect to the F5OS device. Check the host and network connectivity."

        if isinstance(error, (DecodeError, json.JSONDecodeError)):
            return "Received an invalid response from the F5OS API."

        if isinstance(error, DeviceError):
            return f"F5OS API error: {ErrorMessageSanitizer._sanitize_text(str(error))}"

        if isinstance(error, httpx.ConnectError):
            return "Cannot connect to the F5OS device. Please check the host and network."

        return f"An error occurred during {operation}. Please check the logs for details."

    @staticmethod
    def sanitize_for_logs(error: Exception) -> dict[str, Any]:
        """
        Return detailed error info for logging.

        Args:
            error: The exception to log

        Returns:
            Dictionary with error details for logging
        """
        error_info = {
            "error_type": type(error).__name__,
            "error_module": error.__class__.__module__,
            "error_message": ErrorMessageSanitizer._sanitize_text(str(error)),
        }

        if isinstance(error, F5OSError):
            error_info["error_code"] = error.error_code
            error_info["context"] = ErrorMessageSanitizer._sanitize_context(error.context)

        if isinstance(error, DeviceError):
            error_info["status_code"] = error.status_code
            error_info["error_tag"] = error.error_tag

        return error_info

    @staticmethod
    def _sanitize_text(text: str) -> str:
        """Replace the value following any sensitive key with [REDACTED]."""
        sanitized = text
        for pattern in ErrorMessageSanitizer.SENSITIVE_PATTERNS:
            if pattern in sanitized.lower():
                # "password=secret123" becomes "password=[REDACTED]"
                sanitized = re.sub(
                    f"{re.escape(pattern)}\"?\\s*[=:]\\s*\"?[^\\s\",}}]+",
                    f"{pattern}=[REDACTED]",
                    sanitized,
                    flags=re.IGNORECASE,
                )
        return sanitized

    @staticmethod
    def _sanitize_context(context: dict[str, Any] | None) -> dict[str, Any]:
        """Remove sensitive data from a context dictionary, recursively."""
        if not context:
            return {}

        sanitized = {}
        for key, value in context.items():
            key_lower = key.lower()
            is_sensitive = any(
                pattern in key_lower for pattern in ErrorMessageSanitizer.SENSITIVE_PATTERNS
            )

            if is_sensitive:
                sanitized[key] = "[REDACTED]"
            elif isinstance(value, dict):
                sanitized[key] = ErrorMessageSanitizer._sanitize_context(value)
            elif isinstance(value, str):
                sanitized[key] = ErrorMessageSanitizer._sanitize_text(value)
            else:
                sanitized[key] = value

        return sanitized


def log_error_safely(
    logger: logging.Logger,
    error: Exception,
    operation: str = "operation",
    user_message: str | None = None,
) -> str:
    """
    Log error with sanitized details and return a user-facing message.

    Args:
        logger: Logger instance
        error: Exception that occurred
        operation: Description of the operation
        user_message: Optional custom user message

    Returns:
        Sanitized user-facing error message
    """
    error_details = ErrorMessageSanitizer.sanitize_for_logs(error)
    logger.error(f"Error in {operation}: {json.dumps(error_details, default=str)}")

    if user_message:
        return user_message
    return ErrorMessageSanitizer.sanitize_for_user(error, operation)
