"""Relay caller input to the conversation endpoint and speak the reply."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.core.errors import ConversationRelayError, PersistenceError
from cloudgreet.domain.services.tenant_lookup_service import TenantLookupService
from cloudgreet.domain.services.voice_response import (
    Action,
    DEFAULT_TELNYX_VOICE,
    build_reply_actions,
    map_voice_to_telnyx,
)
from cloudgreet.infrastructure.conversation_client import ConversationClient
from cloudgreet.persistence.repositories.call_repository import CallRepository
from cloudgreet.persistence.repositories.conversation_turn_repository import ConversationTurnRepository

logger = logging.getLogger(__name__)

REPROMPT_MESSAGE = "I didn't catch that. Could you please repeat what you need help with?"
CALL_NOT_FOUND_MESSAGE = "I apologize, we're experiencing technical difficulties. Please call back later."
RELAY_UNSUCCESSFUL_MESSAGE = (
    "I apologize, I'm having trouble right now. Let me transfer you to someone who can help."
)
RELAY_ERROR_MESSAGE = "I apologize for the technical difficulty. Please call back later."


class RelayOutcome(str, Enum):
    """How a caller turn was handled."""
    REPROMPT = "reprompt"
    REPLY = "reply"
    TRANSFER = "transfer"
    CALL_NOT_FOUND = "call_not_found"
    UNSUCCESSFUL = "unsuccessful"
    ERROR = "error"


@dataclass
class RelayResult:
    """Actions for Telnyx plus the outcome that produced them."""
    outcome: RelayOutcome
    actions: list[Action]


def extract_user_input(user_response: dict[str, Any] | None) -> str:
    """Return the caller's speech, falling back to DTMF digits."""
    if not user_response:
        return ""
    speech = (user_response.get("speech") or "").strip()
    digits = (user_response.get("digits") or "").strip()
    return speech or digits


class ConversationRelayService:
    """Turns one caller utterance into the next thing the agent says.

    The new turn pair is not stored here; the conversation endpoint appends it
    to the call's history when it generates the reply.
    """

    def __init__(self, session: AsyncSession, client: ConversationClient) -> None:
        """Initialize relay service.

        Args:
            session: Database session
            client: Conversation endpoint client
        """
        self.call_repo = CallRepository(session)
        self.turn_repo = ConversationTurnRepository(session)
        self.lookup = TenantLookupService(session)
        self.client = client

    async def relay(self, call_id: str, user_response: dict[str, Any] | None) -> RelayResult:
        """Handle a finished gather for ``call_id``.

        Never raises: every failure is turned into a spoken apology followed
        by a hangup.
        """
        user_input = extract_user_input(user_response)
        if not user_input:
            logger.info("No caller input, re-prompting", extra={"call_control_id": call_id})
            return RelayResult(
                outcome=RelayOutcome.REPROMPT,
                actions=build_reply_actions(REPROMPT_MESSAGE, DEFAULT_TELNYX_VOICE, continue_call=True),
            )

        try:
            return await self._relay(call_id, user_input)
        except (ConversationRelayError, PersistenceError) as e:
            logger.error(
                f"Conversation relay failed: {e}",
                extra={"call_control_id": call_id, "error_type": type(e).__name__},
            )
            return self._error_result()
        except Exception as e:
            logger.error(
                f"Unexpected error relaying caller input: {type(e).__name__}",
                extra={"call_control_id": call_id, "error_type": type(e).__name__},
                exc_info=True,
            )
            return self._error_result()

    @staticmethod
    def _error_result() -> RelayResult:
        return RelayResult(
            outcome=RelayOutcome.ERROR,
            actions=build_reply_actions(RELAY_ERROR_MESSAGE, DEFAULT_TELNYX_VOICE, continue_call=False),
        )

    async def _relay(self, call_id: str, user_input: str) -> RelayResult:
        call = await self.call_repo.get_by_call_id(call_id)
        if call is None:
            logger.error("Call not found for AI processing", extra={"call_control_id": call_id})
            return RelayResult(
                outcome=RelayOutcome.CALL_NOT_FOUND,
                actions=build_reply_actions(CALL_NOT_FOUND_MESSAGE, DEFAULT_TELNYX_VOICE, continue_call=False),
            )

        turns = await self.turn_repo.list_for_call(call_id)
        history = [{"user_message": t.user_message, "ai_response": t.ai_response} for t in turns]

        reply = await self.client.generate_reply(
            business_id=call.business_id,
            message=user_input,
            conversation_history=history,
            call_id=call_id,
            caller_name=call.caller_name,
            caller_phone=call.from_number,
        )

        if not reply.success or not reply.response:
            logger.error(
                "AI conversation failed",
                extra={"call_control_id": call_id, "error": reply.message},
            )
            return RelayResult(
                outcome=RelayOutcome.UNSUCCESSFUL,
                actions=build_reply_actions(RELAY_UNSUCCESSFUL_MESSAGE, DEFAULT_TELNYX_VOICE, continue_call=False),
            )

        voice = map_voice_to_telnyx(await self.lookup.get_agent_voice(call.business_id))

        if reply.should_transfer:
            return RelayResult(
                outcome=RelayOutcome.TRANSFER,
                actions=build_reply_actions(reply.response, voice, continue_call=False),
            )

        return RelayResult(
            outcome=RelayOutcome.REPLY,
            actions=build_reply_actions(reply.response, voice, continue_call=True),
        )
