"""Phone number assignment model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from cloudgreet.persistence.database import Base


class PhoneNumberAssignment(Base):
    """Maps a Telnyx phone number to the business that owns it."""

    __tablename__ = "toll_free_numbers"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String(50), unique=True, nullable=False, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=True, index=True)
    status = Column(String(30), nullable=False, default="available", index=True)
    assigned_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    business = relationship("Business", back_populates="phone_numbers")

    def __repr__(self) -> str:
        return f"<PhoneNumberAssignment(number={self.number}, business_id={self.business_id}, status={self.status})>"


class PhoneNumberStatus:
    """Phone number status constants."""
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"
    REJECTED = "rejected"
