"""
Tests for VLAN and Velos partition operations.
"""

import asyncio
from types import SimpleNamespace

import pytest

from f5os_client.core import poller
from f5os_client.core.exceptions import (
    DecodeError,
    OperationCancelledError,
    TimedOutError,
    ValidationError,
)
from f5os_client.core.models import PlatformInfo, PlatformKind
from f5os_client.resources import partitions, vlans
from fixtures.mock_responses import partition_state

VLANS_PAYLOAD = {"openconfig-vlan:vlans": {"vlan": [
    {"vlan-id": 444, "config": {"vlan-id": 444, "name": "internal"}}
]}}

PARTITION = "/f5-system-partition:partitions/partition=bigpart"


@pytest.fixture
def running_clock(monkeypatch):
    """Advance the poller clock by 100 seconds on every reading."""
    ticks = iter(range(0, 100000, 100))
    monkeypatch.setattr(poller, "time", SimpleNamespace(monotonic=lambda: next(ticks)))


@pytest.mark.asyncio
class TestVlans:
    """Test VLAN operations and the controller guard."""

    async def test_create_vlans_patches_collection(self, session, device):
        await vlans.create_vlans(session, VLANS_PAYLOAD)

        patch = device.calls("PATCH", "/openconfig-vlan:vlans")[0]
        assert device.body(patch) == VLANS_PAYLOAD

    async def test_get_vlan(self, session, device):
        device.route("GET", "/openconfig-vlan:vlans/vlan=444",
                     (200, {"openconfig-vlan:vlan": [{"vlan-id": 444}]}))

        data = await vlans.get_vlan(session, 444)

        assert data["openconfig-vlan:vlan"][0]["vlan-id"] == 444

    async def test_missing_vlan_is_empty(self, session):
        assert await vlans.get_vlan(session, 999) == {}

    async def test_delete_vlan(self, session, device):
        await vlans.delete_vlan(session, 444)

        assert device.calls("DELETE", "/openconfig-vlan:vlans/vlan=444")

    @pytest.mark.parametrize("vlan_id", [0, 4096, -1])
    async def test_invalid_vlan_id(self, session, device, vlan_id):
        with pytest.raises(ValidationError):
            await vlans.delete_vlan(session, vlan_id)
        assert device.calls("DELETE") == []

    async def test_controller_rejects_writes(self, session, device):
        session.platform = PlatformInfo(kind=PlatformKind.VELOS_CONTROLLER)

        with pytest.raises(ValidationError, match="Velos partitions and rSeries"):
            await vlans.create_vlans(session, VLANS_PAYLOAD)
        with pytest.raises(ValidationError):
            await vlans.delete_vlan(session, 444)

        assert device.calls("PATCH") == []
        assert device.calls("DELETE") == []

    async def test_partition_allows_writes(self, session, device):
        session.platform = PlatformInfo(kind=PlatformKind.VELOS_PARTITION)

        await vlans.create_vlans(session, VLANS_PAYLOAD)

        assert len(device.calls("PATCH", "/openconfig-vlan:vlans")) == 1


@pytest.mark.asyncio
class TestPartitions:
    """Test partition lifecycle operations."""

    async def test_create_partition(self, session, device):
        payload = {"partition": {"name": "bigpart", "config": {"enabled": True}}}

        await partitions.create_partition(session, payload)

        assert device.body(device.calls("POST", "/f5-system-partition:partitions")[0]) == payload

    async def test_update_partition_targets_config(self, session, device):
        await partitions.update_partition(session, "bigpart", {"config": {"enabled": False}})

        assert device.calls("PATCH", PARTITION + "/config")

    async def test_get_partition(self, session, device):
        device.route("GET", PARTITION, (200, {"f5-system-partition:partition": [{"name": "bigpart"}]}))

        data = await partitions.get_partition(session, "bigpart")

        assert data["f5-system-partition:partition"][0]["name"] == "bigpart"

    async def test_missing_partition_is_decode_error(self, session):
        with pytest.raises(DecodeError, match="bigpart"):
            await partitions.get_partition(session, "bigpart")

    async def test_get_partition_slots(self, session, device):
        device.route("GET", "/f5-system-slot:slots/slot", (200, {"f5-system-slot:slot": [
            {"slot-num": 1, "partition": "bigpart"},
            {"slot-num": 2, "partition": "none"},
            {"slot-num": 3, "partition": "bigpart"},
        ]}))

        assert await partitions.get_partition_slots(session, "bigpart") == [1, 3]

    @pytest.mark.parametrize("body", [
        {"f5-system-slot:slot": [{"slot-num": None, "partition": "bigpart"}]},
        {"f5-system-slot:slot": {"slot-num": 1, "partition": "bigpart"}},
        [{"slot-num": 1, "partition": "bigpart"}],
    ])
    async def test_get_partition_slots_wrong_shape(self, session, device, body):
        device.route("GET", "/f5-system-slot:slots/slot", (200, body))

        with pytest.raises(DecodeError, match="get_partition_slots"):
            await partitions.get_partition_slots(session, "bigpart")

    async def test_set_slots(self, session, device):
        await partitions.set_slots(session, "bigpart", [1, 2])

        assert device.body(device.calls("PATCH", "/f5-system-slot:slots")[0]) == {
            "f5-system-slot:slots": {"slot": [
                {"slot-num": 1, "partition": "bigpart"},
                {"slot-num": 2, "partition": "bigpart"},
            ]}
        }

    async def test_update_partition_iso(self, session, device):
        await partitions.update_partition_iso(session, "bigpart", "1.6.1-11066")

        request = device.calls("POST", PARTITION + "/set-version")[0]
        assert device.body(request) == {"f5-system-partition:set-version": {"iso-version": "1.6.1-11066"}}

    async def test_wait_for_partition(self, session, device, instant_sleep):
        device.route("GET", PARTITION + "/state",
                     (200, partition_state("starting", "running")),
                     (200, partition_state("running-active", "running-standby")))

        await partitions.wait_for_partition(session, "bigpart", timeout=600, interval=5)

        assert len(device.calls("GET", PARTITION + "/state")) == 2
        assert 5 in instant_sleep

    @pytest.mark.parametrize("body", [
        {"f5-system-partition:state": {"controllers": "running"}},
        {"f5-system-partition:state": {"controllers": {"controller": [{"partition-status": ["running"]}]}}},
    ])
    async def test_wait_for_partition_wrong_shape(self, session, device, body):
        device.route("GET", PARTITION + "/state", (200, body))

        with pytest.raises(DecodeError, match="get_partition_state"):
            await partitions.wait_for_partition(session, "bigpart", timeout=600, interval=5)

        assert len(device.calls("GET", PARTITION + "/state")) == 1

    async def test_wait_for_partition_times_out(self, session, device, running_clock):
        device.route("GET", PARTITION + "/state", (200, partition_state("starting")))

        with pytest.raises(TimedOutError):
            await partitions.wait_for_partition(session, "bigpart", timeout=150, interval=5)

    async def test_wait_for_partition_cancelled(self, session, device):
        device.route("GET", PARTITION + "/state", (200, partition_state("starting")))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(OperationCancelledError):
            await partitions.wait_for_partition(session, "bigpart", timeout=600, cancel_event=cancel)

        assert len(device.calls("GET", PARTITION + "/state")) == 1

    async def test_delete_partition(self, session, device):
        await partitions.delete_partition(session, "bigpart")

        assert device.calls("DELETE", PARTITION)
