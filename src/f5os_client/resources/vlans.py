"""
F5OS Client - VLANs

VLAN objects live on rSeries appliances and Velos partitions; a Velos
controller has none, so every write is refused there.
"""

import logging
from typing import Any, Dict

from ..core.exceptions import ValidationError
from ..core.models import PlatformKind
from ..core.session import Session
from ..shared.constants import API_VLAN, API_VLANS
from ..shared.error_handlers import validate_vlan_id

logger = logging.getLogger("f5os-client")


def _require_vlan_capable(session: Session, operation: str) -> None:
    if session.platform_kind is PlatformKind.VELOS_CONTROLLER:
        raise ValidationError(
            "VLANs are supported on Velos partitions and rSeries appliances only",
            context={"operation": operation, "platform": session.platform_kind.value},
        )


async def create_vlans(session: Session, payload: Dict[str, Any]) -> bytes:
    """Create or update VLANs from an ``openconfig-vlan:vlans`` payload."""
    _require_vlan_capable(session, "create_vlans")
    logger.info("Configuring VLANs")
    return await session.patch(API_VLANS, payload, operation="create_vlans")


async def get_vlan(session: Session, vlan_id: int) -> Dict[str, Any]:
    validate_vlan_id(vlan_id, "get_vlan")
    return await session.get_json(f"{API_VLAN}={vlan_id}", operation="get_vlan")


async def get_vlans(session: Session) -> Dict[str, Any]:
    return await session.get_json(API_VLAN, operation="get_vlans")


async def delete_vlan(session: Session, vlan_id: int) -> None:
    _require_vlan_capable(session, "delete_vlan")
    validate_vlan_id(vlan_id, "delete_vlan")
    logger.info(f"Deleting VLAN {vlan_id}")
    await session.delete(f"{API_VLAN}={vlan_id}", operation="delete_vlan")
