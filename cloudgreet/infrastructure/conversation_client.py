"""HTTP client for the conversation-generation endpoint."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from cloudgreet.core.errors import ConversationRelayError

logger = logging.getLogger(__name__)


@dataclass
class ConversationReply:
    """Reply from the conversation endpoint."""
    success: bool
    response: str
    should_transfer: bool = False
    message: str | None = None  # error description when success is False


class ConversationClient:
    """Posts caller utterances to the conversation endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize conversation client.

        Args:
            endpoint_url: Full URL of the conversation-voice endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._transport = transport

    async def generate_reply(
        self,
        business_id: int,
        message: str,
        conversation_history: list[dict[str, Any]],
        call_id: str,
        caller_name: str | None = None,
        caller_phone: str | None = None,
        call_context: str = "inbound_call",
    ) -> ConversationReply:
        """Ask the endpoint what the agent should say next.

        Returns:
            ConversationReply (``success`` may be False)

        Raises:
            ConversationRelayError: If the endpoint is unreachable or the
                response body is not a JSON object
        """
        body = {
            "businessId": business_id,
            "message": message,
            "conversationHistory": conversation_history,
            "callerName": caller_name,
            "callerPhone": caller_phone,
            "callId": call_id,
            "callContext": call_context,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint_url, json=body)
            data = response.json()
        except httpx.HTTPError as e:
            raise ConversationRelayError(f"Conversation endpoint unreachable: {type(e).__name__}") from e
        except ValueError as e:
            raise ConversationRelayError(
                f"Conversation endpoint returned non-JSON body (HTTP {response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise ConversationRelayError("Conversation endpoint returned unexpected body")

        return ConversationReply(
            success=bool(data.get("success")),
            response=str(data.get("response") or ""),
            should_transfer=bool(data.get("shouldTransfer")),
            message=data.get("message"),
        )
