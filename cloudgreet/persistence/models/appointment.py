"""Appointment model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from cloudgreet.persistence.database import Base


class Appointment(Base):
    """Appointment booked for a business, usually by the voice agent."""

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False, default="Unknown")
    customer_phone = Column(String(50), nullable=False, default="Unknown")
    service_type = Column(String(255), nullable=True)
    scheduled_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default="scheduled")
    notes = Column(Text, nullable=True)
    source = Column(String(50), nullable=True)  # ai_voice_call, dashboard, ...
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Appointment(id={self.id}, business_id={self.business_id}, status={self.status})>"
