"""
Tests for the long-running operation poller.

This module tests the wait loop (deadline, cancellation) and the state
classifiers for tenants, partitions and file transfers.
"""

import asyncio
import itertools
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from f5os_client.core import poller
from f5os_client.core.exceptions import OperationCancelledError, PollFailureError, TimedOutError
from f5os_client.core.models import PartitionState, TenantStateBody
from f5os_client.core.poller import (
    PollOutcome,
    classify_partition_state,
    classify_tenant_state,
    classify_transfer_status,
    wait_until,
)
from fixtures.mock_responses import partition_state


def fake_clock(monkeypatch, step):
    """Advance time.monotonic by ``step`` seconds on every read."""
    ticks = itertools.count(0, step)
    monkeypatch.setattr(poller, "time", SimpleNamespace(monotonic=lambda: next(ticks)))


@pytest.mark.asyncio
class TestWaitUntil:
    """Test the shared wait loop."""

    async def test_returns_when_done(self, instant_sleep):
        poll = AsyncMock(side_effect=[PollOutcome.CONTINUE, PollOutcome.CONTINUE, PollOutcome.DONE])

        await wait_until(poll, timeout=600, interval=20)

        assert poll.await_count == 3
        assert instant_sleep == [20, 20]

    async def test_done_on_first_poll_does_not_sleep(self, instant_sleep):
        await wait_until(AsyncMock(return_value=PollOutcome.DONE), timeout=0, interval=5)
        assert instant_sleep == []

    async def test_times_out(self, monkeypatch):
        fake_clock(monkeypatch, 10)
        poll = AsyncMock(return_value=PollOutcome.CONTINUE)

        with pytest.raises(TimedOutError) as exc_info:
            await wait_until(poll, timeout=25, interval=10, operation="tenant t1 deployment")

        assert "tenant t1 deployment" in str(exc_info.value)
        assert exc_info.value.context["timeout"] == 25
        assert poll.await_count == 3

    async def test_failure_propagates(self):
        poll = AsyncMock(side_effect=PollFailureError("Failure: disk full"))

        with pytest.raises(PollFailureError, match="disk full"):
            await wait_until(poll, timeout=60, interval=5)

    async def test_cancel_event_already_set(self):
        cancel = asyncio.Event()
        cancel.set()
        poll = AsyncMock(return_value=PollOutcome.CONTINUE)

        with pytest.raises(OperationCancelledError):
            await wait_until(poll, timeout=60, interval=5, cancel_event=cancel)
        assert poll.await_count == 1

    async def test_cancel_event_during_pause(self):
        cancel = asyncio.Event()

        async def poll():
            asyncio.get_running_loop().call_soon(cancel.set)
            return PollOutcome.CONTINUE

        with pytest.raises(OperationCancelledError):
            await wait_until(poll, timeout=60, interval=30, cancel_event=cancel)

    async def test_cancel_event_not_set_keeps_polling(self):
        cancel = asyncio.Event()
        poll = AsyncMock(side_effect=[PollOutcome.CONTINUE, PollOutcome.DONE])

        await wait_until(poll, timeout=60, interval=0.01, cancel_event=cancel)

        assert poll.await_count == 2

    async def test_task_cancellation_propagates(self):
        polled = asyncio.Event()

        async def poll():
            polled.set()
            return PollOutcome.CONTINUE

        task = asyncio.create_task(
            wait_until(poll, timeout=600, interval=300, cancel_event=asyncio.Event())
        )
        await polled.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()

    async def test_outer_timeout_is_not_converted(self):
        poll = AsyncMock(return_value=PollOutcome.CONTINUE)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(
                wait_until(poll, timeout=600, interval=300, cancel_event=asyncio.Event()),
                timeout=0.05,
            )


class TestClassifyTenantState:
    """Test tenant deployment classification."""

    @pytest.mark.parametrize("status, running_state, expected", [
        ("Running", "deployed", PollOutcome.DONE),
        ("Running", None, PollOutcome.DONE),
        ("Configured", "configured", PollOutcome.DONE),
        ("Configured", None, PollOutcome.DONE),
        ("Running", "configured", PollOutcome.CONTINUE),
        ("Configured", "deployed", PollOutcome.CONTINUE),
        ("Starting", "deployed", PollOutcome.CONTINUE),
        ("Pending", "deployed", PollOutcome.CONTINUE),
        ("Provisioned", "DEPLOYED", PollOutcome.CONTINUE),
    ])
    def test_classification(self, status, running_state, expected):
        assert classify_tenant_state(TenantStateBody(status=status), running_state) is expected

    def test_missing_state_continues(self):
        assert classify_tenant_state(None, "deployed") is PollOutcome.CONTINUE
        assert classify_tenant_state(TenantStateBody(), "deployed") is PollOutcome.CONTINUE

    def test_pending_with_instance_errors_fails(self):
        state = TenantStateBody(status="Pending", instances={"instance": [{"status": "Allocation failed"}]})

        with pytest.raises(PollFailureError, match="Allocation failed"):
            classify_tenant_state(state, "deployed")


class TestClassifyPartitionState:
    """Test partition deployment classification."""

    def test_all_controllers_running(self):
        state = PartitionState.model_validate(partition_state("running-active", "running-standby"))
        assert classify_partition_state(state) is PollOutcome.DONE

    def test_one_controller_not_running(self):
        state = PartitionState.model_validate(partition_state("running-active", "starting"))
        assert classify_partition_state(state) is PollOutcome.CONTINUE

    def test_no_controllers_reporting(self):
        assert classify_partition_state(PartitionState.model_validate({})) is PollOutcome.DONE
        assert classify_partition_state(None) is PollOutcome.DONE

    def test_controllers_without_status_are_skipped(self):
        state = PartitionState.model_validate({
            "f5-system-partition:state": {"controllers": {"controller": [
                {"controller": 1}, {"controller": 2, "partition-status": "running"},
            ]}}
        })
        assert classify_partition_state(state) is PollOutcome.DONE


class TestClassifyTransferStatus:
    """Test file transfer classification."""

    @pytest.mark.parametrize("status", ["Completed", "  Completed "])
    def test_completed(self, status):
        assert classify_transfer_status(status) is PollOutcome.DONE

    @pytest.mark.parametrize("status", [None, "", "In Progress", "Queued"])
    def test_in_progress(self, status):
        assert classify_transfer_status(status) is PollOutcome.CONTINUE

    @pytest.mark.parametrize("status", [
        "HTTP Error 404",
        "Couldn't resolve host name",
        "Failure: permission denied",
    ])
    def test_failures(self, status):
        with pytest.raises(PollFailureError) as exc_info:
            classify_transfer_status(status)
        assert exc_info.value.status == status
