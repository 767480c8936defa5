"""Domain services."""

from cloudgreet.domain.services.call_lifecycle_service import CallLifecycleService
from cloudgreet.domain.services.conversation_relay import ConversationRelayService
from cloudgreet.domain.services.notification_service import NotificationService
from cloudgreet.domain.services.tenant_lookup_service import TenantLookupService
from cloudgreet.domain.services.voice_call_dispatcher import VoiceCallDispatcher
from cloudgreet.domain.services.voice_conversation_service import VoiceConversationService

__all__ = [
    "CallLifecycleService",
    "ConversationRelayService",
    "NotificationService",
    "TenantLookupService",
    "VoiceCallDispatcher",
    "VoiceConversationService",
]
