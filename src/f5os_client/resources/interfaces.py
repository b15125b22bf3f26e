"""
F5OS Client - Interfaces

Ethernet interface lookups and updates. Before an update is sent, VLAN
memberships that the new payload no longer carries are deleted from the
device, since a PATCH only adds.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError
from ..core.models import SwitchedVlan, SwitchedVlanConfig, parse_response
from ..core.session import Session
from ..shared.constants import (
    API_INTERFACE,
    API_INTERFACES,
    ETHERNET_CONTAINER,
    NATIVE_VLAN,
    SWITCHED_VLAN,
    TRUNK_VLANS,
)
from ..shared.error_handlers import validate_name

logger = logging.getLogger("f5os-client")

INTERFACES_KEY = "openconfig-interfaces:interfaces"


def encode_name(name: str) -> str:
    """URL-encode an interface name for use as a list key (``1/1.0`` → ``1%2F1.0``)."""
    return quote(name, safe="")


def interface_path(name: str) -> str:
    return f"{API_INTERFACE}={encode_name(name)}"


async def get_interface(session: Session, name: str) -> Dict[str, Any]:
    """Fetch one interface; an unknown interface yields an empty dict."""
    validate_name(name, "name", "get_interface")
    return await session.get_json(interface_path(name), operation="get_interface")


async def get_interfaces(session: Session) -> Dict[str, Any]:
    """Fetch every interface on the device."""
    return await session.get_json(API_INTERFACE, operation="get_interfaces")


async def get_switched_vlans(session: Session, name: str, container: str = ETHERNET_CONTAINER) -> SwitchedVlanConfig:
    """Current native and trunk VLANs of an interface."""
    path = f"{interface_path(name)}/{container}/{SWITCHED_VLAN}"
    data = await session.get_json(path, operation="get_switched_vlans")
    return parse_response(SwitchedVlan, data, "get_switched_vlans").settings


async def remove_native_vlan(session: Session, name: str, container: str = ETHERNET_CONTAINER) -> None:
    """Delete the native VLAN of an interface."""
    path = f"{interface_path(name)}/{container}/{SWITCHED_VLAN}/{NATIVE_VLAN}"
    logger.debug(f"Removing native VLAN from {name}")
    await session.delete(path, operation="remove_native_vlan")


async def remove_trunk_vlan(
    session: Session,
    name: str,
    vlan_id: Union[int, str],
    container: str = ETHERNET_CONTAINER,
) -> None:
    """Delete one trunk VLAN from an interface."""
    path = f"{interface_path(name)}/{container}/{SWITCHED_VLAN}/{TRUNK_VLANS}={vlan_id}"
    logger.debug(f"Removing trunk VLAN {vlan_id} from {name}")
    await session.delete(path, operation="remove_trunk_vlan")


def desired_switched_vlan(entry: Dict[str, Any], container: str) -> SwitchedVlanConfig:
    """Pull the switched-vlan config out of one interface payload entry."""
    body = (entry.get(container) or {}).get(SWITCHED_VLAN) or {}
    try:
        return SwitchedVlanConfig.model_validate(body.get("config") or {})
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid switched-vlan config in interface payload: {e}",
                              context={"interface": entry.get("name")}) from e


def stale_trunk_vlans(
    current: Iterable[Union[int, str]], desired: Iterable[Union[int, str]]
) -> List[Union[int, str]]:
    """Trunk VLANs present on the device but absent from the desired set."""
    wanted = set(desired)
    return [vlan for vlan in current if vlan not in wanted]


async def prune_switched_vlans(
    session: Session,
    name: str,
    entries: List[Dict[str, Any]],
    container: str,
) -> None:
    """Remove memberships of ``name`` that ``entries`` no longer ask for."""
    current = await get_switched_vlans(session, name, container)
    for entry in entries:
        desired = desired_switched_vlan(entry, container)
        if current.native_vlan and desired.native_vlan != current.native_vlan:
            await remove_native_vlan(session, name, container)
        for vlan_id in stale_trunk_vlans(current.trunk_vlans, desired.trunk_vlans):
            await remove_trunk_vlan(session, name, vlan_id, container)


async def update_interface(session: Session, name: str, payload: Dict[str, Any]) -> bytes:
    """Apply an interface payload.

    Args:
        session: Authenticated session
        name: Interface name, e.g. ``1.0`` or ``1/1.0``
        payload: ``{"openconfig-interfaces:interfaces": {"interface": [...]}}``

    Returns:
        Raw PATCH response body
    """
    validate_name(name, "name", "update_interface")
    entries = interface_entries(payload)
    await prune_switched_vlans(session, name, entries, ETHERNET_CONTAINER)
    logger.info(f"Updating interface {name}")
    return await session.patch(API_INTERFACES, payload, operation="update_interface")


def interface_entries(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    return list((payload.get(INTERFACES_KEY) or {}).get("interface") or [])


def first_interface_name(payload: Dict[str, Any]) -> Optional[str]:
    """Name of the first interface in a payload, from ``name`` or ``config.name``."""
    entries = interface_entries(payload)
    if not entries:
        return None
    entry = entries[0]
    return entry.get("name") or (entry.get("config") or {}).get("name")
