"""
F5OS Client - Platform Detection

Classifies a device as an rSeries appliance, a Velos controller or a Velos
partition from its component list, and looks up the running OS version.
Detection is best effort: any failure leaves the platform unknown.
"""

import json
import logging
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..shared.constants import (
    API_COMPONENTS_COMPONENT,
    API_CONTROLLER_IMAGE,
    API_SYSTEM_IMAGE_INSTALL,
)
from .exceptions import F5OSError
from .models import (
    ControllerImageState,
    ImageInstallState,
    PlatformComponent,
    PlatformComponents,
    PlatformInfo,
    PlatformKind,
)

logger = logging.getLogger("f5os-client")

Fetch = Callable[[str], Awaitable[tuple[int, bytes]]]

BLADE_OS_INDEX = "blade-os"
INSTALL_SUCCESS = "success"


async def detect_platform(fetch: Fetch, log: Optional[logging.Logger] = None) -> PlatformInfo:
    """Run the detection cascade.

    Args:
        fetch: Async callable returning ``(status_code, body)`` for an API path
        log: Logger for detection failures

    Returns:
        PlatformInfo; ``PlatformKind.UNKNOWN`` when the device could not be
        classified.
    """
    log = log or logger
    info = PlatformInfo()
    try:
        await _classify(fetch, info)
    except (F5OSError, ValueError, PydanticValidationError) as e:
        log.warning(f"Platform detection failed, continuing as {info.kind.value}: {e}")
    return info


async def _classify(fetch: Fetch, info: PlatformInfo) -> None:
    status, body = await fetch(API_COMPONENTS_COMPONENT)
    if status != 200:
        return

    components = PlatformComponents.model_validate(json.loads(body)).component

    if len(components) > 1:
        for component in components:
            description = component.state.description if component.state else None
            if description is None:
                continue
            if component.name == "platform":
                info.kind = PlatformKind.RSERIES_PLATFORM
                info.description = description
                info.version = await _rseries_version(fetch)
                return
            if component.name == "chassis":
                info.kind = PlatformKind.VELOS_CONTROLLER
                info.description = description
                info.version = await _controller_version(fetch)
                return
    elif len(components) == 1:
        info.kind = PlatformKind.VELOS_PARTITION
        info.version = _partition_version(components[0])


async def _rseries_version(fetch: Fetch) -> Optional[str]:
    status, body = await fetch(API_SYSTEM_IMAGE_INSTALL)
    if status != 200:
        return None
    install = ImageInstallState.model_validate(json.loads(body)).install
    if install and install.install_status == INSTALL_SUCCESS:
        return install.install_os_version
    return None


async def _controller_version(fetch: Fetch) -> Optional[str]:
    status, body = await fetch(API_CONTROLLER_IMAGE)
    if status != 200:
        return None
    image = ControllerImageState.model_validate(json.loads(body)).image
    if not (image and image.state and image.state.controllers):
        return None

    version = None
    for controller in image.state.controllers.controller:
        if controller.install_status == INSTALL_SUCCESS:
            version = controller.os_version
    return version


def _partition_version(component: PlatformComponent) -> Optional[str]:
    software = component.software
    if not (software and software.state and software.state.software_components):
        return None
    entries = software.state.software_components.software_component
    if not entries:
        return None
    first = entries[0]
    if first.software_index == BLADE_OS_INDEX and first.state:
        return first.state.version
    return None
