"""Notification model for business owner alerts."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text

from cloudgreet.persistence.database import Base


class Notification(Base):
    """In-app notification for a business owner."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)

    # Notification type: "call_completed", "client_booking", "system", etc.
    notification_type = Column(String(50), nullable=False, index=True)
    message = Column(Text, nullable=False)

    # Can contain: call_id, appointment_id, ...
    extra_data = Column(JSON, nullable=True)

    is_read = Column(Boolean, default=False, nullable=False, index=True)
    priority = Column(String(20), default="normal", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, business_id={self.business_id}, type={self.notification_type})>"


# Notification types
class NotificationType:
    """Notification type constants."""
    CALL_COMPLETED = "call_completed"
    CLIENT_BOOKING = "client_booking"
    SYSTEM = "system"


# Notification priorities
class NotificationPriority:
    """Notification priority constants."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
