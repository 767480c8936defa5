"""Conversation history model for voice calls."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from cloudgreet.persistence.database import Base


class ConversationTurn(Base):
    """One caller utterance and the AI reply to it.

    Rows are append-only and read back in creation order to rebuild the
    conversation for the next turn.
    """

    __tablename__ = "conversation_history"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    call_id = Column(String(255), nullable=True, index=True)
    caller_name = Column(String(255), nullable=True)
    caller_phone = Column(String(50), nullable=True)
    user_message = Column(Text, nullable=False)
    ai_response = Column(Text, nullable=False)
    conversation_context = Column(String(50), nullable=True)
    ai_model = Column(String(100), nullable=True)
    appointment_booked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<ConversationTurn(id={self.id}, call_id={self.call_id})>"
