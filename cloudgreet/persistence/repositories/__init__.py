"""Repositories for data access."""

from cloudgreet.persistence.repositories.base import BaseRepository
from cloudgreet.persistence.repositories.business_repository import BusinessRepository
from cloudgreet.persistence.repositories.call_repository import CallRepository
from cloudgreet.persistence.repositories.conversation_turn_repository import ConversationTurnRepository

__all__ = [
    "BaseRepository",
    "BusinessRepository",
    "CallRepository",
    "ConversationTurnRepository",
]
