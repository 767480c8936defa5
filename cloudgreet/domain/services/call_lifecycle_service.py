"""Call record lifecycle: initiated -> answered -> completed."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.infrastructure.best_effort import BestEffortResult
from cloudgreet.infrastructure.notification_client import NotificationClient
from cloudgreet.infrastructure.telephony.telnyx_call_control import TelnyxCallControlClient
from cloudgreet.persistence.models.call import Call, CallStatus
from cloudgreet.persistence.models.notification import NotificationPriority, NotificationType
from cloudgreet.persistence.repositories.call_repository import CallRepository

logger = logging.getLogger(__name__)

# Statuses a transition may start from
ANSWERABLE_STATUSES = (CallStatus.INITIATED,)
HANGUP_STATUSES = (CallStatus.INITIATED, CallStatus.ANSWERED)


@dataclass
class HangupResult:
    """What happened while handling a hangup."""
    updated: bool
    recording_stop: BestEffortResult
    notification: BestEffortResult | None = None


class CallLifecycleService:
    """Maintains the call row for one phone call across its webhooks.

    Status changes are conditional on the current status so redelivered or
    out-of-order webhooks never move a call backwards.
    """

    def __init__(
        self,
        session: AsyncSession,
        call_control: TelnyxCallControlClient,
        notifier: NotificationClient,
    ) -> None:
        """Initialize call lifecycle service.

        Args:
            session: Database session
            call_control: Telnyx client used to stop recordings
            notifier: Client used to notify the business owner
        """
        self.call_repo = CallRepository(session)
        self.call_control = call_control
        self.notifier = notifier

    async def get_call(self, call_id: str) -> Call | None:
        return await self.call_repo.get_by_call_id(call_id)

    async def on_initiated(
        self,
        call_id: str,
        business_id: int,
        from_number: str,
        to_number: str,
        direction: str | None,
    ) -> Call:
        """Create the call row with status ``initiated``.

        An existing row for the same call ID is returned unchanged.
        """
        now = datetime.utcnow()
        call, created = await self.call_repo.get_or_create(
            call_id,
            business_id,
            from_number=from_number or "",
            to_number=to_number or "",
            direction=direction or "incoming",
            status=CallStatus.INITIATED,
            created_at=now,
            updated_at=now,
        )
        if created:
            logger.info("Created call record", extra={"call_control_id": call_id, "business_id": business_id})
        else:
            logger.info("Call record already exists, reusing", extra={"call_control_id": call_id})
        return call

    async def on_answered(self, call_id: str, agent_id: int) -> bool:
        """Mark the call answered by ``agent_id``.

        Returns:
            True if the row moved to ``answered``
        """
        now = datetime.utcnow()
        updated = await self.call_repo.update_if_status(
            call_id,
            ANSWERABLE_STATUSES,
            status=CallStatus.ANSWERED,
            ai_agent_id=agent_id,
            answered_at=now,
        )
        if not updated:
            logger.warning(
                "Call not in an answerable state, status unchanged",
                extra={"call_control_id": call_id, "ai_agent_id": agent_id},
            )
        return updated

    async def on_hangup(
        self,
        call_id: str,
        hangup_cause: str | None,
        duration_seconds: int | float | None,
    ) -> HangupResult:
        """Complete the call, stop its recording and notify the owner.

        The recording stop and the notification are best effort; their
        failures are logged and reported in the result, never raised.
        """
        recording_stop = await self.call_control.stop_recording(call_id)

        duration = int(duration_seconds or 0)
        updated = await self.call_repo.update_if_status(
            call_id,
            HANGUP_STATUSES,
            status=CallStatus.COMPLETED,
            outcome=hangup_cause or "completed",
            duration=duration,
            ended_at=datetime.utcnow(),
        )
        if not updated:
            logger.info("Hangup for a call that is already completed or unknown", extra={"call_control_id": call_id})
            return HangupResult(updated=False, recording_stop=recording_stop)

        notification = None
        call = await self.call_repo.get_by_call_id(call_id)
        if call is not None:
            notification = await self.notifier.send(
                business_id=call.business_id,
                message=f"Call completed: {call.from_number} - Duration: {duration}s",
                notification_type=NotificationType.CALL_COMPLETED,
                priority=NotificationPriority.NORMAL,
                extra_data={"call_id": call_id},
            )

        logger.info(
            "Call completed",
            extra={"call_control_id": call_id, "duration": duration, "hangup_cause": hangup_cause},
        )
        return HangupResult(updated=True, recording_stop=recording_stop, notification=notification)

    async def on_recording_saved(self, call_id: str, recording_urls: list[Any] | dict[str, Any] | None) -> str | None:
        """Attach the first available recording URL.

        No status guard: a recording saved after hangup leaves the call
        ``completed``.

        Returns:
            The stored URL, or None when no URL was supplied or the call is unknown
        """
        recording_url = _first_recording_url(recording_urls)
        if recording_url is None:
            return None

        updated = await self.call_repo.update_if_status(call_id, None, recording_url=recording_url)
        if not updated:
            logger.warning("Recording saved for unknown call", extra={"call_control_id": call_id})
            return None
        logger.info("Recording saved", extra={"call_control_id": call_id, "recording_url": recording_url})
        return recording_url


def _first_recording_url(recording_urls: list[Any] | dict[str, Any] | None) -> str | None:
    """Return the first non-empty URL from Telnyx ``recording_urls``.

    Entries are usually ``{"url": ...}`` objects; plain strings and the
    ``{"mp3": ..., "wav": ...}`` mapping form are accepted too.
    """
    if isinstance(recording_urls, dict):
        recording_urls = list(recording_urls.values())
    for entry in recording_urls or []:
        url = entry.get("url") if isinstance(entry, dict) else entry
        if url:
            return str(url)
    return None
