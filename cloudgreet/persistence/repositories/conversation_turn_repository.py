"""Conversation history repository."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.core.errors import PersistenceError
from cloudgreet.persistence.models.conversation_turn import ConversationTurn
from cloudgreet.persistence.repositories.base import BaseRepository


class ConversationTurnRepository(BaseRepository[ConversationTurn]):
    """Repository for the append-only conversation history."""

    def __init__(self, session: AsyncSession):
        """Initialize conversation turn repository."""
        super().__init__(ConversationTurn, session)

    async def list_for_call(self, call_id: str) -> list[ConversationTurn]:
        """List turns for a call, oldest first."""
        stmt = (
            select(ConversationTurn)
            .where(ConversationTurn.call_id == call_id)
            .order_by(ConversationTurn.created_at.asc(), ConversationTurn.id.asc())
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to load conversation history: {type(e).__name__}", call_control_id=call_id
            ) from e
        return list(result.scalars().all())

    async def append(self, business_id: int, **data) -> ConversationTurn:
        try:
            return await self.create(business_id, **data)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(
                f"Failed to store conversation turn: {type(e).__name__}",
                call_control_id=data.get("call_id"),
                business_id=business_id,
            ) from e
