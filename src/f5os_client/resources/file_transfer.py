"""
F5OS Client - File Transfer Operations

Imports and exports run in the background on the device and are tracked in
its transfer-operation list. Entries are matched on one identifying field:
``operation-id`` when the device handed one out, otherwise a file path.
"""

import asyncio
import logging
from typing import Optional

from ..core.models import TransferOperations, parse_response
from ..core.poller import PollOutcome, classify_transfer_status, wait_until
from ..core.session import Session
from ..shared.constants import API_FILE_TRANSFER_STATUS

logger = logging.getLogger("f5os-client")

OPERATION_ID = "operation-id"
LOCAL_FILE_PATH = "local-file-path"
REMOTE_FILE_PATH = "remote-file-path"


async def file_transfer_status(session: Session, key: str, value: str) -> Optional[str]:
    """Status text of the transfer whose ``key`` equals ``value``.

    Returns:
        The trimmed status, or None when no such transfer is listed
    """
    data = await session.get_json(API_FILE_TRANSFER_STATUS, operation="file_transfer_status")
    transfers = parse_response(TransferOperations, data, "file_transfer_status")
    for transfer in transfers.operations:
        if transfer.key(key) == value:
            return (transfer.status or "").strip()
    return None


async def wait_for_transfer(
    session: Session,
    key: str,
    value: str,
    timeout: float,
    interval: float,
    cancel_event: Optional[asyncio.Event] = None,
) -> None:
    """Poll the transfer list until the matching transfer completes.

    A transfer that is not listed yet keeps the loop going.

    Raises:
        PollFailureError: If the device reports the transfer as failed
        TimedOutError: If it does not complete within ``timeout``
    """

    async def poll() -> PollOutcome:
        status = await file_transfer_status(session, key, value)
        session.logger.debug(f"Transfer {value}: {status or 'not listed'}")
        return classify_transfer_status(status)

    await wait_until(
        poll, timeout, interval=interval, cancel_event=cancel_event,
        operation=f"file transfer {value}", log=session.logger,
    )
