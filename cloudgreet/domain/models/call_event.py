"""Telnyx call-control webhook event models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CallEventType(str, Enum):
    """Telnyx call events the voice webhook handles."""

    CALL_INITIATED = "call.initiated"
    CALL_ANSWERED = "call.answered"
    CALL_SPEAK_ENDED = "call.speak.ended"
    CALL_GATHER_ENDED = "call.gather.ended"
    CALL_HANGUP = "call.hangup"
    CALL_RECORDING_SAVED = "call.recording.saved"

    @classmethod
    def parse(cls, value: str) -> "CallEventType | None":
        """Return the member for ``value`` or None for unhandled events."""
        try:
            return cls(value)
        except ValueError:
            return None


# Once-per-call events answered with a status only; redeliveries are dropped.
# Events answered with actions are always handled so a resent webhook gets them again.
DEDUPLICATED_EVENTS = frozenset({
    CallEventType.CALL_HANGUP,
    CallEventType.CALL_RECORDING_SAVED,
})


class UserResponse(BaseModel):
    """Caller input collected by a gather."""

    model_config = ConfigDict(extra="ignore")

    speech: str | None = None
    digits: str | None = None


class CallEventPayload(BaseModel):
    """Fields of ``data.payload`` the handlers use."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    call_control_id: str | None = None
    call_leg_id: str | None = None
    call_session_id: str | None = None
    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    direction: str | None = None
    state: str | None = None
    hangup_cause: str | None = None
    hangup_source: str | None = None
    duration_secs: float | None = None
    recording_urls: list[Any] | dict[str, Any] | None = None
    user_response: UserResponse | None = None


class CallEvent(BaseModel):
    """The ``data`` object of a Telnyx webhook."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    event_type: str = Field(min_length=1)
    occurred_at: str | None = None
    payload: CallEventPayload = Field(default_factory=CallEventPayload)

    @field_validator("payload", mode="before")
    @classmethod
    def _default_payload(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def known_type(self) -> CallEventType | None:
        return CallEventType.parse(self.event_type)


class TelnyxWebhook(BaseModel):
    """Top-level Telnyx webhook envelope."""

    model_config = ConfigDict(extra="ignore")

    data: CallEvent
