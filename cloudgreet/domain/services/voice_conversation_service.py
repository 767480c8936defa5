"""Voice receptionist conversation engine.

Generates the next thing the AI receptionist says on a phone call, books
appointments the model asks for and records the exchange.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.core.errors import NotFoundError
from cloudgreet.domain.services.notification_service import NotificationService
from cloudgreet.infrastructure.best_effort import run_best_effort
from cloudgreet.llm.client import LLMClient
from cloudgreet.persistence.models.appointment import Appointment
from cloudgreet.persistence.models.business import AIAgent, Business
from cloudgreet.persistence.models.notification import NotificationPriority, NotificationType
from cloudgreet.persistence.repositories.base import BaseRepository
from cloudgreet.persistence.repositories.business_repository import BusinessRepository
from cloudgreet.persistence.repositories.call_repository import CallRepository
from cloudgreet.persistence.repositories.conversation_turn_repository import ConversationTurnRepository

logger = logging.getLogger(__name__)

AGENT_NOT_CONFIGURED_MESSAGE = "AI agent not configured. Please complete onboarding first."
BUSINESS_NOT_FOUND_MESSAGE = "Business not found"
EMPTY_REPLY_FALLBACK = "I apologize, could you repeat that?"
BOOKING_CONFIRMATION = "Perfect! I've scheduled that appointment for you. You'll receive a confirmation shortly."
FAILURE_APOLOGY = (
    "I apologize, I'm having a brief technical issue. Let me transfer you to someone who can help."
)

BOOKING_MARKER = "BOOK_APPOINTMENT:"
_BOOKING_PATTERN = re.compile(r"BOOK_APPOINTMENT: (.+)")

# Phone replies stay short; cut the model off before it writes the caller's lines
VOICE_STOP_SEQUENCES = ["\n\n", "Customer:", "Caller:", "Human:", "User:"]
VOICE_MAX_TOKENS = 100
VOICE_TEMPERATURE = 0.85


@dataclass
class VoiceConversationResult:
    """Reply returned to the voice webhook."""
    response: str
    appointment_booked: bool
    conversation_id: str
    timestamp: str


def normalize_history(history: list[dict[str, Any]] | None) -> list[dict[str, str]]:
    """Turn stored history into alternating user/assistant messages.

    Accepts both ``{"user_message", "ai_response"}`` pairs (as sent by the
    voice relay) and ``{"role", "content"}`` messages.
    """
    messages: list[dict[str, str]] = []
    for entry in history or []:
        if not isinstance(entry, dict):
            continue
        if "user_message" in entry or "ai_response" in entry:
            if entry.get("user_message"):
                messages.append({"role": "user", "content": str(entry["user_message"])})
            if entry.get("ai_response"):
                messages.append({"role": "assistant", "content": str(entry["ai_response"])})
            continue
        content = entry.get("content")
        if not content:
            continue
        role = "assistant" if entry.get("role") in ("ai", "assistant") else "user"
        messages.append({"role": role, "content": str(content)})
    return messages


def build_system_prompt(
    business: Business,
    agent: AIAgent,
    caller_name: str | None,
    caller_phone: str | None,
    call_context: str,
) -> str:
    """Build the receptionist persona prompt for one business."""
    config = agent.config
    services = config.get("services") or business.services or ["General Services"]
    service_areas = config.get("service_areas") or business.service_areas or ["Local Area"]
    personality = config.get("personality") or "friendly"

    return f"""You are {agent.agent_name or "Sarah"}, the {personality} AI receptionist for {business.business_name}. You're having a natural phone conversation with {caller_name or "a potential customer"}.

You are a real person on a phone call, not a chatbot. Use natural speech patterns and show genuine interest.

BUSINESS CONTEXT:
- Company: {business.business_name} ({config.get("business_type") or business.business_type})
- Services: {", ".join(services)}
- Service Areas: {", ".join(service_areas)}
- Phone: {business.phone_number}
- Address: {business.address}

CALLER INFO:
- Name: {caller_name or "Not provided yet"}
- Phone: {caller_phone or "Not provided"}
- Context: {call_context}

YOUR PERSONALITY:
- Tone: {personality} and {config.get("tone") or "professional"}
- Voice: {config.get("voice") or "natural"}
- Style: Conversational, warm, genuinely helpful

CONVERSATION GOALS:
1. Greet warmly and ask how you can help
2. Listen carefully and understand their specific need
3. Ask clarifying questions naturally
4. Provide helpful information about services
5. Qualify the lead (property type, urgency, budget range)
6. Offer to schedule an appointment if appropriate
7. Get their contact info if you don't have it

BOOKING APPOINTMENTS:
- Ask about their preferred date and time
- Confirm their contact information and service address
- Understand the scope of work
- When ready to book, respond with: "{BOOKING_MARKER} [details]"

STYLE:
- Use their name when provided
- Remember what they've told you
- Keep responses SHORT (2-3 sentences max for phone)

CUSTOM INSTRUCTIONS:
{config.get("custom_instructions") or ""}

Remember: this is a PHONE CALL. Keep responses brief, natural and conversational."""


def extract_booking_details(reply: str) -> str | None:
    """Return the details after the booking marker, if the model booked."""
    if BOOKING_MARKER not in reply:
        return None
    match = _BOOKING_PATTERN.search(reply)
    return match.group(1).strip() if match else None


def replace_booking_marker(reply: str) -> str:
    return _BOOKING_PATTERN.sub(BOOKING_CONFIRMATION, reply)


class VoiceConversationService:
    """Generates receptionist replies for voice calls."""

    def __init__(self, session: AsyncSession, llm_client: LLMClient) -> None:
        """Initialize voice conversation service.

        Args:
            session: Database session
            llm_client: Language model used for replies
        """
        self.session = session
        self.llm_client = llm_client
        self.business_repo = BusinessRepository(session)
        self.call_repo = CallRepository(session)
        self.turn_repo = ConversationTurnRepository(session)
        self.appointment_repo: BaseRepository[Appointment] = BaseRepository(Appointment, session)
        self.notifications = NotificationService(session)

    async def respond(
        self,
        business_id: int,
        message: str,
        conversation_history: list[dict[str, Any]] | None = None,
        caller_name: str | None = None,
        caller_phone: str | None = None,
        call_id: str | None = None,
        call_context: str = "inbound_call",
    ) -> VoiceConversationResult:
        """Generate the receptionist's reply to one caller utterance.

        Raises:
            NotFoundError: If the business has no active agent or does not exist
            LLMGenerationError: If the language model call fails
            PersistenceError: If the conversation cannot be recorded
        """
        conversation_id = uuid.uuid4().hex[:8]
        started = datetime.utcnow()

        agent = await self.business_repo.get_active_agent(business_id)
        if agent is None:
            logger.error("Active AI agent not found for voice call", extra={"business_id": business_id})
            raise NotFoundError(AGENT_NOT_CONFIGURED_MESSAGE)

        business = await self.business_repo.get(business_id)
        if business is None:
            logger.error("Business not found for voice call", extra={"business_id": business_id})
            raise NotFoundError(BUSINESS_NOT_FOUND_MESSAGE)

        config = agent.config
        context: dict[str, Any] = {
            "system_prompt": build_system_prompt(business, agent, caller_name, caller_phone, call_context),
            "history": normalize_history(conversation_history),
            "max_tokens": VOICE_MAX_TOKENS,
            "temperature": VOICE_TEMPERATURE,
            "stop": VOICE_STOP_SEQUENCES,
        }
        if config.get("ai_model"):
            context["model"] = config["ai_model"]

        reply = (await self.llm_client.generate(message, context)).strip() or EMPTY_REPLY_FALLBACK

        appointment_booked = False
        details = extract_booking_details(reply)
        if details:
            appointment_booked = await self._book_appointment(business_id, caller_name, caller_phone, call_id, details)

        clean_reply = replace_booking_marker(reply)

        await self.turn_repo.append(
            business_id,
            call_id=call_id,
            caller_name=caller_name,
            caller_phone=caller_phone,
            user_message=message,
            ai_response=clean_reply,
            conversation_context=call_context,
            ai_model=config.get("ai_model") or self.llm_client.model_name,
            appointment_booked=appointment_booked,
        )

        if call_id:
            await self.call_repo.update_if_status(call_id, None, transcript=f"User: {message}\nAI: {clean_reply}")

        await self.business_repo.record_agent_conversation(agent, appointment_booked)

        logger.info(
            "Voice AI conversation completed",
            extra={
                "conversation_id": conversation_id,
                "business_id": business_id,
                "call_control_id": call_id,
                "appointment_booked": appointment_booked,
                "duration_ms": int((datetime.utcnow() - started).total_seconds() * 1000),
            },
        )

        return VoiceConversationResult(
            response=clean_reply,
            appointment_booked=appointment_booked,
            conversation_id=conversation_id,
            timestamp=datetime.utcnow().isoformat() + "Z",
        )

    async def _book_appointment(
        self,
        business_id: int,
        caller_name: str | None,
        caller_phone: str | None,
        call_id: str | None,
        details: str,
    ) -> bool:
        """Create the appointment the model asked for.

        A failed booking is logged and the conversation continues.
        """
        scheduled = datetime.utcnow() + timedelta(days=1)
        try:
            appointment = await self.appointment_repo.create(
                business_id,
                customer_name=caller_name or "Unknown",
                customer_phone=caller_phone or "Unknown",
                service_type="Phone Consultation",
                scheduled_date=scheduled,
                status="scheduled",
                notes=details,
                source="ai_voice_call",
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"Failed to book appointment from AI: {type(e).__name__}",
                extra={"business_id": business_id, "call_control_id": call_id},
            )
            return False

        await run_best_effort(
            "booking_notification",
            lambda: self.notifications.notify(
                business_id,
                NotificationType.CLIENT_BOOKING,
                f"New appointment booked via AI: {caller_name or 'Unknown caller'} - {details}",
                priority=NotificationPriority.HIGH,
                extra_data={"appointment_id": appointment.id, "call_id": call_id},
            ),
            business_id=business_id,
        )
        return True
