"""
F5OS Client - Retry Mechanism

This module provides retry functionality with fixed or exponential backoff for
transient failures of device API calls.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Any

from .exceptions import TransientError

logger = logging.getLogger("f5os-client")


class RetryConfig:
    """Configuration for the retry loop of a dispatched request."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 10.0,
        max_delay: float = 60.0,
        exponential_backoff: bool = False,
        retryable_errors: Optional[List[type]] = None
    ):
        """Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts, including the first one
            base_delay: Base delay in seconds between attempts
            max_delay: Maximum delay in seconds between attempts
            exponential_backoff: Whether to double the delay after each attempt
            retryable_errors: List of error types that should trigger a retry
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_backoff = exponential_backoff
        self.retryable_errors = retryable_errors or [TransientError]

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given zero-based attempt."""
        if self.exponential_backoff:
            return min(self.base_delay * (2 ** attempt), self.max_delay)
        return min(self.base_delay, self.max_delay)


async def retry_with_backoff(
    func: Callable[[int], Awaitable[Any]],
    retry_config: Optional[RetryConfig] = None,
    on_retry: Optional[Callable[[Exception, int], Awaitable[None]]] = None,
    retry_logger: Optional[logging.Logger] = None,
) -> Any:
    """Call ``func`` until it succeeds or the retry budget is spent.

    Args:
        func: Async function receiving the zero-based attempt number
        retry_config: Configuration for retry mechanism
        on_retry: Async hook run with the error and attempt number before
            the next attempt is scheduled
        retry_logger: Logger used for retry messages

    Returns:
        Result from the function call

    Raises:
        Exception: Non-retryable errors immediately, otherwise the last
            retryable error once all attempts fail
    """
    if retry_config is None:
        retry_config = RetryConfig()
    log = retry_logger or logger

    last_exception = None

    for attempt in range(retry_config.max_attempts):
        try:
            return await func(attempt)
        except Exception as e:
            last_exception = e

            if not any(isinstance(e, err_type) for err_type in retry_config.retryable_errors):
                raise

            if attempt == retry_config.max_attempts - 1:
                break

            if on_retry is not None:
                await on_retry(e, attempt)

            delay = retry_config.delay_for(attempt)
            log.info(f"Attempt {attempt + 1} failed, retrying in {delay}s: {str(e)}")
            await asyncio.sleep(delay)

    raise last_exception
