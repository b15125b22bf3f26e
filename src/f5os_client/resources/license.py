"""
F5OS Client - Licensing
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.exceptions import DeviceError
from ..core.models import rpc_output
from ..core.session import Session
from ..shared.constants import (
    API_LICENSE_EULA,
    API_LICENSE_INSTALL,
    API_LICENSING,
    LICENSE_INSTALLED_RESULT,
)
from ..shared.error_handlers import validate_name

logger = logging.getLogger("f5os-client")

LICENSE_OUTPUT = "f5-system-licensing-install:output"


def license_payload(registration_key: Optional[str], addon_keys: Optional[List[str]] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    if registration_key:
        payload["f5-system-licensing-install:registration-key"] = registration_key
    if addon_keys:
        payload["f5-system-licensing-install:add-on-keys"] = list(addon_keys)
    return payload


async def get_eula(session: Session, registration_key: str, addon_keys: Optional[List[str]] = None) -> Dict[str, Any]:
    """Fetch the EULA for a registration key. Must precede ``install_license``."""
    validate_name(registration_key, "registration_key", "get_eula")
    return await session.post_json(API_LICENSE_EULA, license_payload(registration_key, addon_keys),
                                   operation="get_eula")


async def install_license(session: Session, registration_key: str, addon_keys: Optional[List[str]] = None) -> None:
    """Install a license.

    Raises:
        DeviceError: Carrying the device result when it is anything but
            a successful installation
    """
    validate_name(registration_key, "registration_key", "install_license")
    data = await session.post_json(API_LICENSE_INSTALL, license_payload(registration_key, addon_keys),
                                   operation="install_license")
    result = rpc_output(data, LICENSE_OUTPUT).result
    if result != LICENSE_INSTALLED_RESULT:
        raise DeviceError(result or f"License install failed: {data}", context={"result": result})
    logger.info("License installed successfully")


async def get_license(session: Session) -> Dict[str, Any]:
    return await session.get_json(API_LICENSING, operation="get_license")
