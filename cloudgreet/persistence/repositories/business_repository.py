"""Business, agent and phone number lookups."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cloudgreet.core.errors import PersistenceError
from cloudgreet.persistence.models.business import AIAgent, Business
from cloudgreet.persistence.models.phone_number import PhoneNumberAssignment, PhoneNumberStatus
from cloudgreet.persistence.repositories.base import BaseRepository


class BusinessRepository(BaseRepository[Business]):
    """Repository for Business entities and their call-path configuration."""

    def __init__(self, session: AsyncSession):
        """Initialize business repository."""
        super().__init__(Business, session)

    async def get(self, business_id: int) -> Business | None:
        try:
            return await self.get_by_id(None, business_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load business: {type(e).__name__}", business_id=business_id) from e

    async def get_assigned_number(self, number: str) -> PhoneNumberAssignment | None:
        """Get the assigned phone number record with its business loaded.

        Args:
            number: Phone number exactly as delivered by Telnyx

        Returns:
            Assignment with status ``assigned`` or None
        """
        stmt = (
            select(PhoneNumberAssignment)
            .options(selectinload(PhoneNumberAssignment.business))
            .where(
                PhoneNumberAssignment.number == number,
                PhoneNumberAssignment.status == PhoneNumberStatus.ASSIGNED,
            )
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to look up phone number: {type(e).__name__}") from e
        return result.scalars().first()

    async def get_active_agent(self, business_id: int) -> AIAgent | None:
        """Get the active AI agent for a business."""
        stmt = (
            select(AIAgent)
            .where(AIAgent.business_id == business_id, AIAgent.is_active == True)  # noqa: E712
            .order_by(AIAgent.updated_at.desc())
            .limit(1)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load AI agent: {type(e).__name__}", business_id=business_id) from e
        return result.scalar_one_or_none()

    async def record_agent_conversation(self, agent: AIAgent, appointment_booked: bool) -> None:
        """Bump the agent's conversation counters."""
        metrics = dict(agent.performance_metrics or {})
        metrics["total_conversations"] = metrics.get("total_conversations", 0) + 1
        metrics["appointments_booked"] = metrics.get("appointments_booked", 0) + (1 if appointment_booked else 0)
        metrics["last_conversation"] = datetime.utcnow().isoformat()
        agent.performance_metrics = metrics
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(
                f"Failed to update agent metrics: {type(e).__name__}", business_id=agent.business_id
            ) from e
