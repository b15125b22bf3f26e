"""
F5OS Client

An asynchronous client for F5OS appliances (rSeries and Velos) that talks to
the device's RESTCONF JSON API: session management, request dispatch with
retry and re-authentication, and polling of long-running operations.
"""

__version__ = "1.0.0"

from .core.config_loader import ConfigLoader
from .core.exceptions import (
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
from .core.models import F5OSConfig, PlatformInfo, PlatformKind
from .core.session import Session, create_session

__all__ = [
    # Exceptions
    "F5OSError",
    "ConfigurationError",
    "ValidationError",
    "AuthenticationError",
    "LoginChallengeError",
    "TransportError",
    "TransientError",
    "DeviceError",
    "DecodeError",
    "TimedOutError",
    "PollFailureError",
    "OperationCancelledError",
    # Core classes
    "F5OSConfig",
    "PlatformInfo",
    "PlatformKind",
    "Session",
    "create_session",
    "ConfigLoader",
]
