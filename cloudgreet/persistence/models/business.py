"""Business (tenant) and AI agent models."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from cloudgreet.persistence.database import Base


class Business(Base):
    """Business model representing a tenant.

    Businesses are never hard-deleted; ``status`` carries the soft state.
    """

    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    business_name = Column(String(255), nullable=False)
    business_type = Column(String(100), nullable=True)  # HVAC, roofing, ...
    phone_number = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    services = Column(JSON, nullable=True)
    service_areas = Column(JSON, nullable=True)
    owner_email = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, suspended, cancelled
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    agents = relationship("AIAgent", back_populates="business")
    phone_numbers = relationship("PhoneNumberAssignment", back_populates="business")
    calls = relationship("Call", back_populates="business")

    def __repr__(self) -> str:
        return f"<Business(id={self.id}, business_name={self.business_name}, status={self.status})>"


class AIAgent(Base):
    """Per-business AI receptionist configuration.

    ``configuration`` holds the free-form agent settings: voice, personality,
    tone, custom_instructions, ai_model, greeting_message, services and
    service_areas.
    """

    __tablename__ = "ai_agents"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    agent_name = Column(String(100), nullable=True)
    greeting_message = Column(Text, nullable=True)
    configuration = Column(JSON, nullable=True)
    performance_metrics = Column(JSON, nullable=True)  # total_conversations, appointments_booked, last_conversation
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    business = relationship("Business", back_populates="agents")

    @property
    def config(self) -> dict:
        return self.configuration or {}

    @property
    def voice(self) -> str | None:
        return self.config.get("voice")

    def __repr__(self) -> str:
        return f"<AIAgent(id={self.id}, business_id={self.business_id}, is_active={self.is_active})>"
