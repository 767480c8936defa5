"""Call model for voice calls."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from cloudgreet.persistence.database import Base


class Call(Base):
    """One row per phone call, keyed by the Telnyx call control ID."""

    __tablename__ = "calls"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    call_id = Column(String(255), unique=True, nullable=False, index=True)  # Telnyx call_control_id
    from_number = Column(String(50), nullable=False)
    to_number = Column(String(50), nullable=False)
    direction = Column(String(20), nullable=False, default="incoming")
    status = Column(String(20), nullable=False, default="initiated", index=True)
    ai_agent_id = Column(Integer, ForeignKey("ai_agents.id"), nullable=True)
    caller_name = Column(String(255), nullable=True)
    duration = Column(Integer, nullable=True)  # Duration in seconds
    outcome = Column(String(100), nullable=True)  # Telnyx hangup cause
    recording_url = Column(Text, nullable=True)
    transcript = Column(Text, nullable=True)
    answered_at = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    business = relationship("Business", back_populates="calls")

    def __repr__(self) -> str:
        return f"<Call(id={self.id}, business_id={self.business_id}, call_id={self.call_id}, status={self.status})>"


class CallStatus:
    """Call status constants."""
    INITIATED = "initiated"
    ANSWERED = "answered"
    COMPLETED = "completed"
