"""
Process tracking client.

Correlates an execution with a lifecycle record in the external tracking
service: one create call returning a numeric processId, then status updates
posted to <base-url>/<processId>.

Design Principles:
- Optional: no URL configured means every call is a no-op
- Non-blocking: failures are logged and never reach the caller
- Single attempt: no retry on any call
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import httpx

from podrunner.errors import TrackingError

logger = logging.getLogger("podrunner.tracking")

MAX_MESSAGE_LENGTH = 1000
TRUNCATION_MARKER = "... [truncated]"


class TrackingStatus(str, Enum):
    """Lifecycle status of a tracked execution."""

    PROGRESS = "PROGRESS"
    SUCCESSFUL = "SUCCESSFUL"
    FAILED = "FAILED"


class MessageLevel(str, Enum):
    INFO = "INFO"
    ERROR = "ERROR"


@dataclass
class TrackingRecord:
    """A lifecycle record owned by the tracking service."""

    process_id: int
    correlation_id: str
    stage: str
    group: str
    status: TrackingStatus = TrackingStatus.PROGRESS


def message_level(status: Union[TrackingStatus, str]) -> MessageLevel:
    """FAILED maps to ERROR, every other status to INFO."""
    if isinstance(status, TrackingStatus):
        status = status.value
    return MessageLevel.ERROR if status == TrackingStatus.FAILED.value else MessageLevel.INFO


def truncate_message(message: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    """Cut message to at most limit characters, marking the cut."""
    if len(message) <= limit:
        return message
    return message[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


class TrackingClient:
    """Client for the process tracking service."""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize tracking client.

        Args:
            base_url: Creation endpoint; None or empty disables tracking
            timeout: Connect/read timeout in seconds for each call
            transport: Optional httpx transport (tests inject a mock one)
        """
        self.base_url = base_url or None
        self.timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.base_url is not None

    def update_url(self, process_id: int) -> str:
        return f"{self.base_url.rstrip('/')}/{process_id}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def create(
        self, name: str, correlation_id: str, stage: str, group: str
    ) -> Optional[TrackingRecord]:
        """
        Create the tracking record for an execution.

        Returns:
            TrackingRecord, or None when tracking is not configured

        Raises:
            TrackingError: If no processId could be obtained
        """
        if not self.enabled:
            logger.debug(
                f"[ProcessTracking CREATE] Skipping for trackingId {correlation_id}: "
                f"PROCESS_TRACKING_SERVICE_URL not set"
            )
            return None

        payload = {
            "name": name,
            "stage": stage,
            "group": group,
            "label": name,
            "trackingId": correlation_id,
            "status": TrackingStatus.PROGRESS.value,
        }

        logger.info(
            f"[ProcessTracking CREATE] Sending creation request for '{name}', "
            f"trackingId {correlation_id}"
        )
        try:
            async with self._client() as client:
                response = await client.post(self.base_url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TrackingError(f"Failed to send create request: {e}") from e

        if not response.is_success:
            raise TrackingError(
                f"Create request failed with status {response.status_code}: {response.text[:200]}"
            )

        try:
            body: Dict[str, Any] = response.json()
        except ValueError as e:
            raise TrackingError(f"Failed to parse create response: {e}") from e

        process_id = body.get("processId") if isinstance(body, dict) else None
        if isinstance(process_id, str) and process_id.isdigit():
            process_id = int(process_id)
        if not isinstance(process_id, int) or isinstance(process_id, bool) or process_id == 0:
            raise TrackingError("processId missing or zero in create response")

        logger.info(
            f"[ProcessTracking CREATE] trackingId {correlation_id} received processId {process_id}"
        )
        return TrackingRecord(
            process_id=process_id,
            correlation_id=correlation_id,
            stage=stage,
            group=group,
        )

    async def update(
        self,
        record: Optional[TrackingRecord],
        status: TrackingStatus,
        message: Optional[str] = None,
    ) -> bool:
        """
        Post a status update for an existing record.

        No-op when tracking is not configured or there is no record.
        Never raises.

        Returns:
            True if the tracking service accepted the update
        """
        if not self.enabled or record is None:
            return False

        payload: Dict[str, Any] = {
            "status": status.value,
            "messageLevel": message_level(status).value,
        }
        if message:
            payload["message"] = truncate_message(message)

        url = self.update_url(record.process_id)
        logger.info(
            f"[ProcessTracking UPDATE] Sending status '{status.value}' for processId "
            f"{record.process_id} (trackingId {record.correlation_id})"
        )
        try:
            async with self._client() as client:
                response = await client.post(url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(
                f"[ProcessTracking UPDATE] Error sending update for processId {record.process_id}: {e}"
            )
            return False

        if not response.is_success:
            logger.error(
                f"[ProcessTracking UPDATE] Update failed for processId {record.process_id}: "
                f"status {response.status_code}, body: {response.text[:200]}"
            )
            return False

        record.status = status
        return True
