"""API request schemas."""

from cloudgreet.api.schemas.conversation import ConversationVoiceRequest
from cloudgreet.api.schemas.notification import NotificationSendRequest

__all__ = ["ConversationVoiceRequest", "NotificationSendRequest"]
