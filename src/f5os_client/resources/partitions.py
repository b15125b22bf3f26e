"""
F5OS Client - Partitions

Velos partition lifecycle on a controller: create, update, slot assignment,
ISO version changes and waiting for the partition to come up on every
controller.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..core.client import decode_json
from ..core.exceptions import DecodeError
from ..core.models import PartitionState, Slots, parse_response
from ..core.poller import PARTITION_POLL_INTERVAL, PollOutcome, classify_partition_state, wait_until
from ..core.session import Session
from ..shared.constants import API_PARTITION, API_PARTITIONS, API_SLOTS, API_SLOTS_SLOT
from ..shared.error_handlers import validate_name

logger = logging.getLogger("f5os-client")

PARTITION_LIST_KEY = "f5-system-partition:partition"


def partition_path(name: str) -> str:
    return f"{API_PARTITION}={name}"


async def create_partition(session: Session, payload: Dict[str, Any]) -> bytes:
    """Create a partition from a ``{"partition": {...}}`` payload."""
    logger.info("Creating partition")
    return await session.post(API_PARTITIONS, payload, operation="create_partition")


async def update_partition(session: Session, name: str, payload: Dict[str, Any]) -> bytes:
    validate_name(name, "name", "update_partition")
    logger.info(f"Updating partition {name}")
    return await session.patch(f"{partition_path(name)}/config", payload, operation="update_partition")


async def delete_partition(session: Session, name: str) -> None:
    validate_name(name, "name", "delete_partition")
    logger.info(f"Deleting partition {name}")
    await session.delete(partition_path(name), operation="delete_partition")


async def get_partition(session: Session, name: str) -> Dict[str, Any]:
    """Fetch a partition.

    Raises:
        DecodeError: If the device returns no partition entry
    """
    validate_name(name, "name", "get_partition")
    body = await session.get(partition_path(name), operation="get_partition")
    data = decode_json(body, "get_partition")
    if not isinstance(data, dict) or not data.get(PARTITION_LIST_KEY):
        raise DecodeError(
            body.decode(errors="replace") or f"Partition '{name}' not found",
            context={"partition": name},
        )
    return data


async def get_partition_slots(session: Session, name: str) -> List[int]:
    """Slot numbers currently assigned to ``name``."""
    data = await session.get_json(API_SLOTS_SLOT, operation="get_partition_slots")
    slots = parse_response(Slots, data, "get_partition_slots").slots
    return [slot.slot_num for slot in slots if slot.partition == name]


async def set_slots(session: Session, name: str, slots: List[int]) -> bytes:
    """Assign ``slots`` to partition ``name``."""
    payload = {
        "f5-system-slot:slots": {
            "slot": [{"slot-num": int(slot), "partition": name} for slot in slots]
        }
    }
    logger.info(f"Assigning slots {slots} to partition {name}")
    return await session.patch(API_SLOTS, payload, operation="set_slots")


async def update_partition_iso(session: Session, name: str, iso_version: str) -> bytes:
    """Switch a partition to another ISO version."""
    validate_name(name, "name", "update_partition_iso")
    payload = {"f5-system-partition:set-version": {"iso-version": iso_version}}
    logger.info(f"Setting partition {name} to ISO {iso_version}")
    return await session.post(f"{partition_path(name)}/set-version", payload, operation="update_partition_iso")


async def get_partition_state(session: Session, name: str) -> PartitionState:
    data = await session.get_json(f"{partition_path(name)}/state", operation="get_partition_state")
    return parse_response(PartitionState, data, "get_partition_state")


async def wait_for_partition(
    session: Session,
    name: str,
    timeout: float,
    interval: float = PARTITION_POLL_INTERVAL,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """Wait until every controller reports the partition as running.

    Raises:
        TimedOutError: If the partition is not running within ``timeout``
        OperationCancelledError: If the wait is cancelled
    """

    async def poll() -> PollOutcome:
        return classify_partition_state(await get_partition_state(session, name))

    await wait_until(
        poll, timeout, interval=interval, cancel_event=cancel_event,
        operation=f"partition {name} deployment", log=session.logger,
    )
