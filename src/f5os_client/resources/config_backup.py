"""
F5OS Client - Configuration Backups

A backup is a database snapshot stored under ``configs/`` on the device and
then exported to a remote host. The export runs in the background and is
tracked through the file transfer list.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from ..core.exceptions import DeviceError
from ..core.models import FileExport, RpcOutput, rpc_output
from ..core.poller import EXPORT_POLL_INTERVAL
from ..core.session import Session
from ..shared.constants import (
    API_CONFIG_BACKUP,
    API_FILE_DELETE,
    API_FILE_EXPORT,
    API_FILE_LIST,
    BACKUP_SUCCESS_PREFIX,
    CONFIG_BACKUP_DIR,
    FILE_DELETE_RESULT,
    TRANSFER_INITIATED_PREFIX,
)
from ..shared.error_handlers import validate_name
from .file_transfer import LOCAL_FILE_PATH, OPERATION_ID, file_transfer_status, wait_for_transfer

logger = logging.getLogger("f5os-client")

DATABASE_OUTPUT = "f5-database:output"
FILE_TRANSFER_OUTPUT = "f5-utils-file-transfer:output"

__all__ = [
    "create_config_backup",
    "export_config_backup",
    "list_config_backups",
    "delete_config_backup",
    "file_transfer_status",
    "backup_file_path",
]


def backup_file_path(name: str) -> str:
    return f"{CONFIG_BACKUP_DIR}{name}"


async def create_config_backup(
    session: Session,
    name: str,
    export: FileExport,
    timeout: float,
    interval: float = EXPORT_POLL_INTERVAL,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """Create a database backup and export it to a remote host.

    Args:
        session: Authenticated session
        name: Backup file name, stored as ``configs/<name>``
        export: Remote target of the export
        timeout: Seconds allowed for the export to complete
        interval: Seconds between transfer status polls

    Raises:
        DeviceError: If the backup or the export is refused
        PollFailureError: If the transfer fails
        TimedOutError: If the transfer does not complete in time
    """
    validate_name(name, "name", "create_config_backup")
    data = await session.post_json(API_CONFIG_BACKUP, {"f5-database:name": name}, operation="create_config_backup")
    result = rpc_output(data, DATABASE_OUTPUT).result or ""
    if not result.startswith(BACKUP_SUCCESS_PREFIX):
        raise DeviceError(f"Failed to create database config backup: {result}",
                          context={"backup": name, "result": result})
    logger.info(f"Created config backup {name}")

    output = await export_config_backup(session, export)
    if output.operation_id:
        key, value = OPERATION_ID, output.operation_id
    else:
        key, value = LOCAL_FILE_PATH, backup_file_path(name)

    logger.debug(f"Tracking export of {name} by {key}={value}")
    await wait_for_transfer(session, key, value, timeout, interval, cancel_event)
    logger.info(f"Exported config backup {name} to {export.remote_host}")


async def export_config_backup(session: Session, export: FileExport) -> RpcOutput:
    """Start the export of a backup file.

    Raises:
        DeviceError: If the device does not initiate the transfer
    """
    data = await session.post_json(API_FILE_EXPORT, _export_payload(export), operation="export_config_backup")
    output = rpc_output(data, FILE_TRANSFER_OUTPUT)
    result = output.result or ""
    if not result.startswith(TRANSFER_INITIATED_PREFIX):
        raise DeviceError(f"Unable to initiate backup file transfer: {result}",
                          context={"remote_host": export.remote_host, "result": result})
    return output


def _export_payload(export: FileExport) -> Dict[str, Any]:
    return export.model_dump(by_alias=True)


async def list_config_backups(session: Session) -> Dict[str, Any]:
    """List the files stored under ``configs/``."""
    return await session.post_json(API_FILE_LIST, {"f5-utils-file-transfer:path": CONFIG_BACKUP_DIR},
                                   operation="list_config_backups")


async def delete_config_backup(session: Session, name: str) -> None:
    """Delete a backup file from the device.

    Raises:
        DeviceError: If the device does not confirm the deletion
    """
    validate_name(name, "name", "delete_config_backup")
    data = await session.post_json(API_FILE_DELETE, {"f5-utils-file-transfer:file-name": backup_file_path(name)},
                                   operation="delete_config_backup")
    result = rpc_output(data, FILE_TRANSFER_OUTPUT).result
    if result != FILE_DELETE_RESULT:
        raise DeviceError(f"Unable to delete the config backup file: {result}",
                          context={"backup": name, "result": result})
    logger.info(f"Deleted config backup {name}")
