"""Database models."""

from cloudgreet.persistence.models.appointment import Appointment
from cloudgreet.persistence.models.business import AIAgent, Business
from cloudgreet.persistence.models.call import Call, CallStatus
from cloudgreet.persistence.models.conversation_turn import ConversationTurn
from cloudgreet.persistence.models.notification import Notification, NotificationPriority, NotificationType
from cloudgreet.persistence.models.phone_number import PhoneNumberAssignment, PhoneNumberStatus

__all__ = [
    "AIAgent",
    "Appointment",
    "Business",
    "Call",
    "CallStatus",
    "ConversationTurn",
    "Notification",
    "NotificationPriority",
    "NotificationType",
    "PhoneNumberAssignment",
    "PhoneNumberStatus",
]
