"""
F5OS Client - Link Aggregation

LAG interfaces, their member ports and the LACP settings that go with them.
Creating a LAG takes three PATCHes; when a later step fails the earlier ones
are rolled back so no half-configured LAG is left behind.
"""

import logging
from typing import Any, Dict, List

from ..core.exceptions import F5OSError, ValidationError
from ..core.session import Session
from ..shared.constants import (
    AGGREGATION_CONTAINER,
    API_INTERFACES,
    API_LACP_INTERFACE,
    LAG_MEMBER_AGGREGATE_ID,
)
from ..shared.error_handlers import validate_name
from ..shared.error_sanitizer import log_error_safely
from .interfaces import (
    encode_name,
    first_interface_name,
    interface_entries,
    interface_path,
    prune_switched_vlans,
)

logger = logging.getLogger("f5os-client")

ROOT_PATH = "/"


async def get_lag_interface(session: Session, name: str) -> Dict[str, Any]:
    validate_name(name, "name", "get_lag_interface")
    return await session.get_json(interface_path(name), operation="get_lag_interface")


async def get_lacp_interface(session: Session, name: str) -> Dict[str, Any]:
    validate_name(name, "name", "get_lacp_interface")
    return await session.get_json(f"{API_LACP_INTERFACE}={encode_name(name)}", operation="get_lacp_interface")


async def create_lag_interface(
    session: Session,
    interface: Dict[str, Any],
    members: Dict[str, Any],
    lacp: Dict[str, Any],
) -> bytes:
    """Create a LAG with its members and LACP mode/interval.

    Args:
        session: Authenticated session
        interface: Interfaces payload declaring the aggregate interface
        members: Interfaces payload tying member ports to the aggregate
        lacp: LACP payload with mode and interval

    Returns:
        Raw response of the member PATCH

    Raises:
        ValidationError: If the interface payload names no interface
        DeviceError: From the failing step, after rollback
    """
    lag_name = first_interface_name(interface)
    if not lag_name:
        raise ValidationError("LAG interface payload does not name an interface",
                              context={"operation": "create_lag_interface"})

    logger.info(f"Creating LAG interface {lag_name}")
    await session.patch(ROOT_PATH, interface, operation="create_lag_interface")

    try:
        response = await update_lag_members(session, members)
    except F5OSError:
        await _rollback(session, lag_name, [])
        raise

    try:
        await session.patch(ROOT_PATH, lacp, operation="set_lacp_mode_interval")
    except F5OSError:
        await _rollback(session, lag_name, member_names(members))
        raise

    return response


async def _rollback(session: Session, lag_name: str, members: List[str]) -> None:
    logger.warning(f"Rolling back partially created LAG {lag_name}")
    try:
        await remove_lag_members(session, members)
        await remove_lag_interface(session, lag_name)
    except F5OSError as e:
        log_error_safely(logger, e, f"rollback of LAG {lag_name}")


async def update_lag_interface(
    session: Session,
    name: str,
    interface: Dict[str, Any],
    lacp: Dict[str, Any],
) -> bytes:
    """Update a LAG, pruning VLAN memberships the payload dropped."""
    validate_name(name, "name", "update_lag_interface")
    await prune_switched_vlans(session, name, interface_entries(interface), AGGREGATION_CONTAINER)

    logger.info(f"Updating LAG interface {name}")
    response = await session.patch(API_INTERFACES, interface, operation="update_lag_interface")
    await session.patch(ROOT_PATH, lacp, operation="set_lacp_mode_interval")
    return response


async def update_lag_members(session: Session, members: Dict[str, Any]) -> bytes:
    """Attach member ports to their aggregate."""
    return await session.patch(ROOT_PATH, members, operation="update_lag_members")


async def remove_lag_members(session: Session, members: List[str]) -> None:
    """Detach each member port from its aggregate; stops at the first failure."""
    for member in members:
        path = f"{interface_path(member)}/{LAG_MEMBER_AGGREGATE_ID}"
        await session.delete(path, operation="remove_lag_member")


async def remove_lag_interface(session: Session, name: str) -> None:
    await session.delete(interface_path(name), operation="remove_lag_interface")


async def remove_lacp_interface(session: Session, name: str) -> None:
    await session.delete(f"{API_LACP_INTERFACE}={encode_name(name)}", operation="remove_lacp_interface")


def member_names(members: Dict[str, Any]) -> List[str]:
    return [entry["name"] for entry in interface_entries(members) if entry.get("name")]
