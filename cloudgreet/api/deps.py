"""FastAPI dependencies for process-wide clients and per-request services."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.core.webhook_signature import TelnyxSignatureVerifier
from cloudgreet.domain.services.voice_call_dispatcher import VoiceCallDispatcher
from cloudgreet.infrastructure.conversation_client import ConversationClient
from cloudgreet.infrastructure.notification_client import NotificationClient
from cloudgreet.infrastructure.redis import RedisClient
from cloudgreet.infrastructure.telephony.telnyx_call_control import TelnyxCallControlClient
from cloudgreet.llm.client import LLMClient
from cloudgreet.llm.factory import get_llm_client
from cloudgreet.persistence.database import get_db
from cloudgreet.settings import settings


def get_call_control_client(request: Request) -> TelnyxCallControlClient:
    return request.app.state.call_control


def get_notification_client(request: Request) -> NotificationClient:
    return request.app.state.notification_client


def get_conversation_client(request: Request) -> ConversationClient:
    return request.app.state.conversation_client


def get_redis(request: Request) -> RedisClient | None:
    return getattr(request.app.state, "redis", None)


def get_signature_verifier(request: Request) -> TelnyxSignatureVerifier | None:
    """Return the webhook signature verifier, or None when verification is off."""
    return getattr(request.app.state, "signature_verifier", None)


def get_llm(request: Request) -> LLMClient:
    """Get the LLM client, creating it on first use."""
    client = getattr(request.app.state, "llm_client", None)
    if client is None:
        client = get_llm_client()
        request.app.state.llm_client = client
    return client


async def get_voice_call_dispatcher(
    db: Annotated[AsyncSession, Depends(get_db)],
    call_control: Annotated[TelnyxCallControlClient, Depends(get_call_control_client)],
    notifier: Annotated[NotificationClient, Depends(get_notification_client)],
    conversation_client: Annotated[ConversationClient, Depends(get_conversation_client)],
    redis: Annotated[RedisClient | None, Depends(get_redis)],
) -> VoiceCallDispatcher:
    """Build the dispatcher for one webhook delivery."""
    return VoiceCallDispatcher(
        db,
        call_control,
        notifier,
        conversation_client,
        redis=redis,
        idempotency_ttl_seconds=settings.webhook_idempotency_ttl_seconds,
    )
