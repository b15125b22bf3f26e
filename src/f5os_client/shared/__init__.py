"""
F5OS Client - Shared Utilities

This package contains endpoint constants and the error helpers shared by the
core and the resource modules.
"""

from . import constants
from .error_handlers import (
    ErrorResponse,
    ErrorSeverity,
    handle_operation_error,
    validate_name,
    validate_vlan_id,
)
from .error_sanitizer import ErrorMessageSanitizer, log_error_safely

__all__ = [
    "ErrorMessageSanitizer",
    "ErrorResponse",
    "ErrorSeverity",
    "constants",
    "handle_operation_error",
    "log_error_safely",
    "validate_name",
    "validate_vlan_id",
]
