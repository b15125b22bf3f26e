"""
F5OS Client - Long-Running Operation Poller

Tenant deployment, partition deployment, image import and config-backup
export all finish asynchronously on the device. This module provides the
shared wait loop and the pure classifiers that turn a polled state into a
verdict.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from .exceptions import OperationCancelledError, PollFailureError, TimedOutError
from .models import PartitionState, TenantStateBody

logger = logging.getLogger("f5os-client")

TENANT_POLL_INTERVAL = 20.0
PARTITION_POLL_INTERVAL = 20.0
IMPORT_POLL_INTERVAL = 20.0
EXPORT_POLL_INTERVAL = 5.0

RUNNING_PARTITION_STATES = frozenset({"running", "running-active", "running-standby"})
TRANSFER_FAILURE_MARKERS = ("HTTP Error", "Couldn't resolve host", "Failure")


class PollOutcome(str, Enum):
    """Verdict of a single poll."""
    DONE = "done"
    CONTINUE = "continue"


async def wait_until(
    poll: Callable[[], Awaitable[PollOutcome]],
    timeout: float,
    *,
    interval: float,
    cancel_event: Optional[asyncio.Event] = None,
    operation: str = "operation",
    log: Optional[logging.Logger] = None,
) -> None:
    """Poll until ``poll`` reports DONE.

    Args:
        poll: Async callable returning a PollOutcome or raising PollFailureError
        timeout: Seconds allowed since the loop started
        interval: Seconds to wait between polls
        cancel_event: Optional event that aborts the wait when set
        operation: Name of the awaited operation for logs and errors
        log: Logger for progress messages

    Raises:
        PollFailureError: As raised by ``poll``
        TimedOutError: If the deadline passes before DONE
        OperationCancelledError: If ``cancel_event`` is set. Task cancellation
            propagates as ``asyncio.CancelledError``.
    """
    log = log or logger
    start = time.monotonic()
    attempts = 0

    while True:
        attempts += 1
        if await poll() is PollOutcome.DONE:
            log.info(f"{operation} finished after {attempts} poll(s)")
            return

        elapsed = time.monotonic() - start
        if elapsed > timeout:
            raise TimedOutError(
                f"{operation} did not finish within {timeout}s",
                context={"operation": operation, "timeout": timeout, "attempts": attempts},
            )

        log.debug(f"{operation} still in progress, next poll in {interval}s")
        if await _pause(interval, cancel_event):
            log.info(f"{operation} wait cancelled")
            raise OperationCancelledError(
                f"Waiting for {operation} was cancelled",
                context={"operation": operation, "attempts": attempts},
            )


async def _pause(interval: float, cancel_event: Optional[asyncio.Event]) -> bool:
    """Sleep for ``interval``; True when the cancel event fired first."""
    if cancel_event is None:
        await asyncio.sleep(interval)
        return False
    if cancel_event.is_set():
        return True
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=interval)
    except asyncio.TimeoutError:
        return False
    return True


def classify_tenant_state(state: Optional[TenantStateBody], running_state: Optional[str] = None) -> PollOutcome:
    """Classify a polled tenant state.

    ``running_state`` is the desired state from the tenant configuration
    (``deployed`` or ``configured``). Without one, reaching either Running
    or Configured counts as done.
    """
    status = state.status if state else None
    if not status or "Starting" in status:
        return PollOutcome.CONTINUE

    desired = running_state.lower() if running_state else None
    if "Running" in status and desired in (None, "deployed"):
        return PollOutcome.DONE
    if "Configured" in status and desired in (None, "configured"):
        return PollOutcome.DONE
    if "Pending" in status and state.instances is not None:
        raise PollFailureError(str(state.instances), context={"tenant_status": status})
    return PollOutcome.CONTINUE


def classify_partition_state(state: Optional[PartitionState]) -> PollOutcome:
    """A partition is done when every reporting controller runs it."""
    controllers = []
    if state and state.state and state.state.controllers:
        controllers = [c for c in state.state.controllers.controller if c is not None]

    for controller in controllers:
        if controller.partition_status is None:
            continue
        if controller.partition_status not in RUNNING_PARTITION_STATES:
            return PollOutcome.CONTINUE
    return PollOutcome.DONE


def classify_transfer_status(status: Optional[str]) -> PollOutcome:
    """Classify the status text of a file transfer operation."""
    if not status:
        return PollOutcome.CONTINUE
    if "Completed" in status:
        return PollOutcome.DONE
    if any(marker in status for marker in TRANSFER_FAILURE_MARKERS):
        raise PollFailureError(status, context={"transfer_status": status})
    return PollOutcome.CONTINUE

