"""
F5OS Client - Error Handling Helpers

This module provides error handling utilities, user-friendly diagnostics
and the small input validators shared by the resource modules.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict

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
from .error_sanitizer import ErrorMessageSanitizer

logger = logging.getLogger("f5os-client")

MIN_VLAN_ID = 1
MAX_VLAN_ID = 4095


class ErrorSeverity(str, Enum):
    """Enumeration for error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorResponse:
    """Structured error response with user-friendly messaging."""

    def __init__(self, error: Exception, operation: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        """Initialize error response.

        Args:
            error: The exception that occurred
            operation: Name of the operation that failed
            severity: Severity level of the error
        """
        self.error = error
        self.operation = operation
        self.severity = severity
        self.timestamp = datetime.utcnow()
        self.error_id = f"{operation}_{int(self.timestamp.timestamp())}"

    def get_user_message(self) -> str:
        """Get user-friendly error message.

        Returns:
            Human-readable error message
        """
        if isinstance(self.error, LoginChallengeError):
            return "The device answered with its web UI. Check that the host points at the F5OS API."
        elif isinstance(self.error, AuthenticationError):
            return "Authentication failed. Please check your F5OS username and password."
        elif isinstance(self.error, TransportError):
            return "Cannot connect to the F5OS device. Please check the host and network connectivity."
        elif isinstance(self.error, TransientError):
            return "Request timed out. The F5OS device may be busy."
        elif isinstance(self.error, ConfigurationError):
            return "F5OS connection not configured. Please run 'f5os setup' first."
        elif isinstance(self.error, ValidationError):
            return f"Invalid input: {self.error.message}"
        elif isinstance(self.error, DeviceError):
            return f"Device error: {ErrorMessageSanitizer._sanitize_text(self.error.message)}"
        elif isinstance(self.error, DecodeError):
            return "The device returned a response that could not be understood."
        elif isinstance(self.error, TimedOutError):
            return f"Timed out waiting for {self.operation} to complete."
        elif isinstance(self.error, PollFailureError):
            return f"{self.operation} failed on the device: {self.error.status}"
        elif isinstance(self.error, OperationCancelledError):
            return f"{self.operation} was cancelled."
        else:
            return f"An unexpected error occurred during {self.operation}."

    def get_technical_details(self) -> Dict[str, Any]:
        """Get sanitized technical error details for logging."""
        details = {
            "error_id": self.error_id,
            "operation": self.operation,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "error_type": type(self.error).__name__,
            "message": ErrorMessageSanitizer._sanitize_text(str(self.error)),
        }

        if isinstance(self.error, F5OSError):
            info = self.error.to_dict()
            info["message"] = details["message"]
            info["context"] = ErrorMessageSanitizer._sanitize_context(self.error.context)
            details.update(info)

        if isinstance(self.error, DeviceError):
            details["status_code"] = self.error.status_code
            details["error_tag"] = self.error.error_tag
            details["error_path"] = self.error.error_path

        return details


def handle_operation_error(
    operation: str,
    error: Exception,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    log: logging.Logger = logger,
) -> str:
    """Log an operation failure and return the diagnostic to show the user.

    Args:
        operation: Name of the operation that failed
        error: The exception that occurred
        severity: Severity level of the error
        log: Logger receiving the technical details

    Returns:
        User-friendly error message
    """
    error_response = ErrorResponse(error, operation, severity)

    technical_details = error_response.get_technical_details()
    log.error(f"Error in {operation}: {json.dumps(technical_details, indent=2, default=str)}")

    return f"Error: {error_response.get_user_message()}"


def validate_vlan_id(vlan_id: int, operation: str) -> None:
    """Validate a VLAN identifier.

    Raises:
        ValidationError: If the id is outside 1-4095
    """
    if isinstance(vlan_id, bool) or not isinstance(vlan_id, int) or not MIN_VLAN_ID <= vlan_id <= MAX_VLAN_ID:
        raise ValidationError(
            f"Invalid VLAN id: {vlan_id}",
            context={"vlan_id": vlan_id, "operation": operation,
                     "expected_range": f"{MIN_VLAN_ID}-{MAX_VLAN_ID}"}
        )


def validate_name(value: str, parameter: str, operation: str) -> None:
    """Validate that a resource name is a non-empty string.

    Raises:
        ValidationError: If the name is empty
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"Parameter '{parameter}' must be a non-empty string",
            context={"operation": operation, "parameter": parameter, "value": value}
        )
