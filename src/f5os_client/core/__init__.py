"""
F5OS Client - Core Infrastructure

This package contains the session, transport, dispatcher and poller that
every resource module builds on.
"""

from .client import DEFAULT_POLICY, TENANT_POLICY, F5OSClient, RequestPolicy, RequestResponseLogger
from .config_loader import ConfigLoader
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    DeviceError,
    F5OSError,
    LoginChallengeError,
    OperationCancelledError,
    PollFailureError,
    ReauthenticationRequired,
    TimedOutError,
    TransientError,
    TransportError,
    ValidationError,
)
from .log_config import configure_logging
from .models import ErrorEnvelope, F5OSConfig, PlatformInfo, PlatformKind
from .poller import PollOutcome, wait_until
from .retry import RetryConfig, retry_with_backoff
from .session import Session, create_session

__all__ = [
    # Exceptions
    "F5OSError",
    "ConfigurationError",
    "ValidationError",
    "AuthenticationError",
    "LoginChallengeError",
    "TransportError",
    "TransientError",
    "ReauthenticationRequired",
    "DeviceError",
    "DecodeError",
    "TimedOutError",
    "PollFailureError",
    "OperationCancelledError",
    # Models
    "F5OSConfig",
    "ErrorEnvelope",
    "PlatformInfo",
    "PlatformKind",
    # Client
    "F5OSClient",
    "RequestPolicy",
    "RequestResponseLogger",
    "DEFAULT_POLICY",
    "TENANT_POLICY",
    # Session
    "Session",
    "create_session",
    # Poller
    "PollOutcome",
    "wait_until",
    # Retry
    "RetryConfig",
    "retry_with_backoff",
    # Configuration
    "ConfigLoader",
    "configure_logging",
]
