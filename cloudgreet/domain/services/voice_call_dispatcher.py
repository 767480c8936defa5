"""Telnyx voice webhook dispatcher.

Routes one webhook delivery to the handler for its event type and returns
the body Telnyx should receive. Nothing is kept between deliveries; call
continuity lives entirely in the database.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.core.call_context import set_business_context, set_call_context
from cloudgreet.core.errors import InvalidWebhookError, PersistenceError
from cloudgreet.core.idempotency import generate_webhook_delivery_key
from cloudgreet.domain.models.call_event import DEDUPLICATED_EVENTS, CallEvent, CallEventType
from cloudgreet.domain.services.call_lifecycle_service import CallLifecycleService
from cloudgreet.domain.services.conversation_relay import ConversationRelayService
from cloudgreet.domain.services.tenant_lookup_service import ResolutionStatus, TenantLookupService
from cloudgreet.domain.services.voice_response import (
    answer_action,
    build_goodbye_actions,
    build_greeting_actions,
    gather_action,
    map_voice_to_telnyx,
)
from cloudgreet.infrastructure.conversation_client import ConversationClient
from cloudgreet.infrastructure.notification_client import NotificationClient
from cloudgreet.infrastructure.redis import RedisClient
from cloudgreet.infrastructure.telephony.telnyx_call_control import TelnyxCallControlClient

logger = logging.getLogger(__name__)

NOT_IN_SERVICE_MESSAGE = "Thank you for calling. This number is not currently in service."
UNAVAILABLE_MESSAGE = "Thank you for calling. We are currently unavailable."


@dataclass
class DispatchResult:
    """Response body and HTTP status for Telnyx."""
    body: dict[str, Any] = field(default_factory=dict)
    status_code: int = 200

    @classmethod
    def actions(cls, actions: list[dict[str, Any]]) -> "DispatchResult":
        return cls(body={"actions": actions})

    @classmethod
    def status(cls, status: str, status_code: int = 200) -> "DispatchResult":
        return cls(body={"status": status}, status_code=status_code)


class VoiceCallDispatcher:
    """Dispatches Telnyx call-control webhooks by event type."""

    # Event type -> handler method; checked for completeness below the class
    HANDLERS: dict[CallEventType, str] = {
        CallEventType.CALL_INITIATED: "handle_call_initiated",
        CallEventType.CALL_ANSWERED: "handle_call_answered",
        CallEventType.CALL_SPEAK_ENDED: "handle_speak_ended",
        CallEventType.CALL_GATHER_ENDED: "handle_gather_ended",
        CallEventType.CALL_HANGUP: "handle_call_hangup",
        CallEventType.CALL_RECORDING_SAVED: "handle_recording_saved",
    }

    def __init__(
        self,
        session: AsyncSession,
        call_control: TelnyxCallControlClient,
        notifier: NotificationClient,
        conversation_client: ConversationClient,
        redis: RedisClient | None = None,
        idempotency_ttl_seconds: int = 300,
    ) -> None:
        """Initialize dispatcher with its collaborators.

        Args:
            session: Database session for this delivery
            call_control: Telnyx call control client
            notifier: Business owner notification client
            conversation_client: Conversation endpoint client
            redis: Optional Redis client for delivery de-duplication
            idempotency_ttl_seconds: How long a delivery key is remembered
        """
        self.lookup = TenantLookupService(session)
        self.lifecycle = CallLifecycleService(session, call_control, notifier)
        self.relay = ConversationRelayService(session, conversation_client)
        self.redis = redis
        self.idempotency_ttl_seconds = idempotency_ttl_seconds

    async def dispatch(self, event: CallEvent) -> DispatchResult:
        """Handle one webhook delivery.

        Raises:
            InvalidWebhookError: If a handled event has no call control ID
        """
        event_type = event.known_type
        payload = event.payload
        set_call_context(payload.call_control_id)

        logger.info(
            "Telnyx webhook received",
            extra={"event_type": event.event_type, "event_id": event.id},
        )

        if event_type is None:
            logger.info("Unhandled webhook event", extra={"event_type": event.event_type})
            return DispatchResult.status("received")

        if not payload.call_control_id:
            raise InvalidWebhookError(f"{event.event_type} without call_control_id")

        delivery_key = await self._claim_delivery(event, event_type)
        if delivery_key is False:
            logger.info("Duplicate webhook delivery ignored", extra={"event_type": event.event_type})
            return DispatchResult.status("duplicate")

        handler = getattr(self, self.HANDLERS[event_type])
        try:
            result = await handler(event)
        except PersistenceError as e:
            logger.error(
                f"Error handling {event.event_type}: {e}",
                extra={
                    "event_type": event.event_type,
                    "call_control_id": e.call_control_id or payload.call_control_id,
                    "business_id": e.business_id,
                },
            )
            result = DispatchResult.status("error", status_code=500)
        except Exception:
            await self._release_delivery(delivery_key)
            raise

        if result.status_code >= 500:
            await self._release_delivery(delivery_key)
        return result

    async def _claim_delivery(self, event: CallEvent, event_type: CallEventType) -> str | bool | None:
        """Claim this delivery in Redis.

        Returns:
            The claimed key, None when de-duplication does not apply, or
            False when another delivery already holds the key
        """
        if self.redis is None or event_type not in DEDUPLICATED_EVENTS:
            return None

        key = generate_webhook_delivery_key(event.event_type, event.payload.call_control_id, event.id)
        if not await self.redis.claim(key, self.idempotency_ttl_seconds):
            return False
        return key

    async def _release_delivery(self, delivery_key: str | bool | None) -> None:
        if self.redis is not None and isinstance(delivery_key, str):
            await self.redis.release(delivery_key)

    async def handle_call_initiated(self, event: CallEvent) -> DispatchResult:
        """Answer a new inbound call and create its call record."""
        payload = event.payload
        business = await self.lookup.find_business(payload.to)
        if business is None:
            return DispatchResult.actions(build_goodbye_actions(NOT_IN_SERVICE_MESSAGE, answer_first=True))

        set_business_context(business.id)
        await self.lifecycle.on_initiated(
            payload.call_control_id,
            business.id,
            payload.from_,
            payload.to,
            payload.direction,
        )
        return DispatchResult.actions([answer_action()])

    async def handle_call_answered(self, event: CallEvent) -> DispatchResult:
        """Start recording and greet the caller with the agent's greeting."""
        payload = event.payload
        resolution = await self.lookup.resolve(payload.to)

        if resolution.status == ResolutionStatus.NUMBER_NOT_FOUND:
            return DispatchResult.actions(build_goodbye_actions(UNAVAILABLE_MESSAGE))

        business = resolution.business
        set_business_context(business.id)

        if resolution.status == ResolutionStatus.AGENT_NOT_FOUND:
            message = (
                f"Thank you for calling {business.business_name}. "
                "We are currently unavailable. Please try again later."
            )
            return DispatchResult.actions(build_goodbye_actions(message))

        agent = resolution.agent
        await self.lifecycle.on_answered(payload.call_control_id, agent.id)

        greeting = (
            agent.greeting_message
            or agent.config.get("greeting_message")
            or f"Thank you for calling {business.business_name}. How can I help you today?"
        )
        voice = map_voice_to_telnyx(agent.voice or "alloy")
        return DispatchResult.actions(build_greeting_actions(greeting, voice))

    async def handle_speak_ended(self, event: CallEvent) -> DispatchResult:
        """Listen for the caller after the agent finished speaking."""
        return DispatchResult.actions([gather_action()])

    async def handle_gather_ended(self, event: CallEvent) -> DispatchResult:
        """Relay the caller's input and speak the reply."""
        payload = event.payload
        user_response = payload.user_response.model_dump() if payload.user_response else None
        result = await self.relay.relay(payload.call_control_id, user_response)
        logger.info("Caller turn handled", extra={"relay_outcome": result.outcome.value})
        return DispatchResult.actions(result.actions)

    async def handle_call_hangup(self, event: CallEvent) -> DispatchResult:
        """Complete the call record."""
        payload = event.payload
        await self.lifecycle.on_hangup(payload.call_control_id, payload.hangup_cause, payload.duration_secs)
        return DispatchResult.status("call_ended")

    async def handle_recording_saved(self, event: CallEvent) -> DispatchResult:
        """Store the recording URL on the call."""
        payload = event.payload
        recording_url = await self.lifecycle.on_recording_saved(payload.call_control_id, payload.recording_urls)
        if recording_url is None:
            return DispatchResult.status("no_recording")
        return DispatchResult.status("recording_saved")


def _check_handlers_exhaustive() -> None:
    missing = [t.value for t in CallEventType if t not in VoiceCallDispatcher.HANDLERS]
    if missing:
        raise RuntimeError(f"VoiceCallDispatcher has no handler for: {', '.join(missing)}")
    for method_name in VoiceCallDispatcher.HANDLERS.values():
        if not callable(getattr(VoiceCallDispatcher, method_name, None)):
            raise RuntimeError(f"VoiceCallDispatcher.{method_name} is not defined")


_check_handlers_exhaustive()
