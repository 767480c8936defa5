"""Conversation endpoint schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConversationVoiceRequest(BaseModel):
    """Body posted by the voice webhook for each caller turn."""

    model_config = ConfigDict(populate_by_name=True)

    business_id: int | None = Field(default=None, alias="businessId")
    message: str = ""
    conversation_history: list[dict[str, Any]] = Field(default_factory=list, alias="conversationHistory")
    caller_name: str | None = Field(default=None, alias="callerName")
    caller_phone: str | None = Field(default=None, alias="callerPhone")
    call_id: str | None = Field(default=None, alias="callId")
    call_context: str = Field(default="inbound_call", alias="callContext")
