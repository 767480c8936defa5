"""HTTP client for the business owner notification endpoint."""

import logging

import httpx

from cloudgreet.infrastructure.best_effort import BestEffortResult, run_best_effort
from cloudgreet.persistence.models.notification import NotificationPriority, NotificationType

logger = logging.getLogger(__name__)


class NotificationClient:
    """Sends notifications through the internal notification endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._transport = transport

    async def _post(self, body: dict) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.endpoint_url, json=body)
            response.raise_for_status()
            return response.json()

    async def send(
        self,
        business_id: int,
        message: str,
        notification_type: str = NotificationType.CALL_COMPLETED,
        priority: str = NotificationPriority.NORMAL,
        extra_data: dict | None = None,
    ) -> BestEffortResult:
        """Send a notification to a business owner. Never raises.

        Args:
            business_id: Business to notify
            message: Notification text
            notification_type: Notification type constant
            priority: Notification priority constant
            extra_data: Optional structured data stored with the notification
        """
        body = {
            "type": notification_type,
            "message": message,
            "businessId": business_id,
            "priority": priority,
        }
        if extra_data:
            body["extraData"] = extra_data

        return await run_best_effort(
            "send_notification",
            lambda: self._post(body),
            business_id=business_id,
            notification_type=notification_type,
        )
