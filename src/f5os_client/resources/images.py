"""
F5OS Client - Tenant Images

Tenant images are either pulled by the device from a remote server (import)
or pushed from the local machine (upload). Imports are tracked in the file
transfer list by their remote file path.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.exceptions import DeviceError, ValidationError
from ..core.models import rpc_output
from ..core.poller import IMPORT_POLL_INTERVAL
from ..core.session import Session
from ..shared.constants import (
    API_FILE_IMPORT,
    API_FILE_START_UPLOAD,
    API_IMAGE_UPLOAD,
    API_TENANT_IMAGE,
    API_TENANT_IMAGE_REMOVE,
    IMAGE_REMOVE_RESULT,
    IMPORT_ALREADY_EXISTS,
)
from ..shared.error_handlers import validate_name
from .file_transfer import REMOTE_FILE_PATH, wait_for_transfer

logger = logging.getLogger("f5os-client")

IMAGES_DIR = "images/"
UPLOAD_OUTPUT = "f5-file-upload-meta-data:output"
IMAGES_OUTPUT = "f5-tenant-images:output"


def image_path(name: str) -> str:
    return f"{API_TENANT_IMAGE}={name}"


async def get_image(session: Session, name: str) -> Dict[str, Any]:
    validate_name(name, "name", "get_image")
    return await session.get_json(image_path(name), operation="get_image")


async def get_images(session: Session) -> Dict[str, Any]:
    return await session.get_json(API_TENANT_IMAGE, operation="get_images")


async def is_imported(session: Session, name: str) -> Dict[str, Any]:
    """Import status of an image as reported by the device."""
    validate_name(name, "name", "is_imported")
    return await session.get_json(f"{image_path(name)}/status", operation="is_imported")


async def import_image(
    session: Session,
    remote_host: str,
    remote_file: str,
    timeout: float,
    local_file: str = IMAGES_DIR,
    insecure: str = "",
    interval: float = IMPORT_POLL_INTERVAL,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """Have the device download an image and wait for the transfer.

    Raises:
        DeviceError: If the device refuses the import, e.g. the file exists
        PollFailureError: If the transfer fails
        TimedOutError: If the transfer does not complete within ``timeout``
    """
    validate_name(remote_file, "remote_file", "import_image")
    payload = {
        "insecure": insecure,
        "local-file": local_file,
        "remote-file": remote_file,
        "remote-host": remote_host,
    }
    body = await session.post(API_FILE_IMPORT, payload, operation="import_image")
    text = body.decode(errors="replace")
    if IMPORT_ALREADY_EXISTS in text:
        raise DeviceError(text, response_text=text, context={"remote_file": remote_file})

    logger.info(f"Importing image {remote_file} from {remote_host}")
    await wait_for_transfer(session, REMOTE_FILE_PATH, remote_file, timeout, interval, cancel_event)


async def upload_image(session: Session, file_path: str) -> bytes:
    """Upload a local image file to the device.

    Raises:
        ValidationError: If the file does not exist
        DeviceError: If the device does not hand out an upload id
    """
    path = Path(file_path)
    if not path.is_file():
        raise ValidationError(f"Image file not found: {file_path}", context={"file_path": file_path})

    upload_id = await _start_upload(session, path)
    logger.info(f"Uploading {path.name} with upload id {upload_id}")
    with open(path, "rb") as f:
        return await session.upload(API_IMAGE_UPLOAD, {"image": (path.name, f)}, upload_id)


async def _start_upload(session: Session, path: Path) -> str:
    payload = {"size": path.stat().st_size, "name": path.name, "file-path": IMAGES_DIR}
    data = await session.post_json(API_FILE_START_UPLOAD, payload, operation="start_upload")
    upload_id = rpc_output(data, UPLOAD_OUTPUT).upload_id
    if not upload_id:
        raise DeviceError("Failed to get the upload ID", context={"file": path.name})
    return upload_id


async def delete_image(session: Session, name: str) -> None:
    """Remove a tenant image.

    Raises:
        DeviceError: If the device does not confirm the removal
    """
    validate_name(name, "name", "delete_image")
    data = await session.post_json(API_TENANT_IMAGE_REMOVE, {"name": name}, operation="delete_image")
    result = rpc_output(data, IMAGES_OUTPUT).result
    if result != IMAGE_REMOVE_RESULT:
        raise DeviceError(f"Delete of tenant image {name} failed: {data}",
                          context={"image": name, "result": result})
    logger.info(f"Deleted tenant image {name}")
