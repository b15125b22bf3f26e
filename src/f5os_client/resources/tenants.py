"""
F5OS Client - Tenants

Tenant deployment. Create and update return once the tenant reaches the
running state asked for in its configuration, or fail when the device
parks it in Pending with instance errors.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from ..core.client import TENANT_POLICY, decode_json
from ..core.exceptions import DecodeError, ValidationError
from ..core.models import TenantState, parse_response
from ..core.poller import TENANT_POLL_INTERVAL, PollOutcome, classify_tenant_state, wait_until
from ..core.session import Session
from ..shared.constants import API_TENANT, API_TENANTS
from ..shared.error_handlers import validate_name

logger = logging.getLogger("f5os-client")

TENANT_LIST_KEY = "f5-tenants:tenant"
TENANTS_KEY = "f5-tenants:tenants"


def tenant_path(name: str) -> str:
    return f"{API_TENANT}={name}"


def tenant_identity(payload: Dict[str, Any]) -> Tuple[str, Optional[str]]:
    """Name and desired running state of the first tenant in a payload.

    Accepts both the create shape ``{"f5-tenants:tenant": [...]}`` and the
    update shape ``{"f5-tenants:tenants": {"tenant": [...]}}``.

    Raises:
        ValidationError: If the payload carries no named tenant
    """
    tenants = payload.get(TENANT_LIST_KEY)
    if tenants is None:
        tenants = (payload.get(TENANTS_KEY) or {}).get("tenant")
    if not tenants or not tenants[0].get("name"):
        raise ValidationError("Tenant payload does not name a tenant", context={"keys": list(payload)})
    tenant = tenants[0]
    return tenant["name"], (tenant.get("config") or {}).get("running-state")


async def create_tenant(
    session: Session,
    payload: Dict[str, Any],
    timeout: float,
    interval: float = TENANT_POLL_INTERVAL,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """Create a tenant and wait for its deployment.

    Raises:
        DeviceError: With the tenant error envelope if the POST is rejected
        PollFailureError: If the tenant ends up Pending with instance errors
        TimedOutError: If the tenant does not settle within ``timeout``
    """
    name, running_state = tenant_identity(payload)
    logger.info(f"Creating tenant {name}")
    await session.post(API_TENANTS, payload, policy=TENANT_POLICY, operation="create_tenant")
    await wait_for_tenant(session, name, timeout, running_state, interval, cancel_event)


async def update_tenant(
    session: Session,
    payload: Dict[str, Any],
    timeout: float,
    interval: float = TENANT_POLL_INTERVAL,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """Replace tenant configuration and wait for it to settle."""
    name, running_state = tenant_identity(payload)
    logger.info(f"Updating tenant {name}")
    await session.put(API_TENANTS, payload, operation="update_tenant")
    await wait_for_tenant(session, name, timeout, running_state, interval, cancel_event)


async def get_tenant(session: Session, name: str) -> Dict[str, Any]:
    """Fetch a tenant.

    Raises:
        DecodeError: If the device returns no tenant entry
    """
    validate_name(name, "name", "get_tenant")
    body = await session.get(tenant_path(name), operation="get_tenant")
    data = decode_json(body, "get_tenant")
    if not isinstance(data, dict) or not data.get(TENANT_LIST_KEY):
        raise DecodeError(f"GetTenant failed with: {body.decode(errors='replace')}",
                          context={"tenant": name})
    return data


async def delete_tenant(session: Session, name: str) -> None:
    validate_name(name, "name", "delete_tenant")
    logger.info(f"Deleting tenant {name}")
    await session.delete(tenant_path(name), operation="delete_tenant")


async def get_tenant_state(session: Session, name: str) -> TenantState:
    data = await session.get_json(f"{tenant_path(name)}/state", operation="get_tenant_state")
    return parse_response(TenantState, data, "get_tenant_state")


async def wait_for_tenant(
    session: Session,
    name: str,
    timeout: float,
    running_state: Optional[str] = None,
    interval: float = TENANT_POLL_INTERVAL,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """Poll the tenant state until it matches ``running_state``."""

    async def poll() -> PollOutcome:
        state = await get_tenant_state(session, name)
        return classify_tenant_state(state.state, running_state)

    await wait_until(
        poll, timeout, interval=interval, cancel_event=cancel_event,
        operation=f"tenant {name} deployment", log=session.logger,
    )
