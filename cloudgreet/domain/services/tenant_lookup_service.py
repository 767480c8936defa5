"""Resolve an inbound phone number to its business and active AI agent."""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.persistence.models.business import AIAgent, Business
from cloudgreet.persistence.repositories.business_repository import BusinessRepository

logger = logging.getLogger(__name__)


class ResolutionStatus(str, Enum):
    """Outcome of a tenant lookup."""
    RESOLVED = "resolved"
    NUMBER_NOT_FOUND = "number_not_found"
    AGENT_NOT_FOUND = "agent_not_found"


@dataclass
class TenantResolution:
    """Result of resolving a called number."""
    status: ResolutionStatus
    business: Business | None = None
    agent: AIAgent | None = None

    @property
    def is_resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED


class TenantLookupService:
    """Read-only lookup of the business and agent behind a Telnyx number."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize lookup service.

        Args:
            session: Database session
        """
        self.business_repo = BusinessRepository(session)

    async def find_business(self, to_number: str | None) -> Business | None:
        """Find the business a number is assigned to.

        Args:
            to_number: Called number as delivered by Telnyx

        Returns:
            Business or None when the number is not assigned
        """
        if not to_number:
            return None
        assignment = await self.business_repo.get_assigned_number(to_number)
        if assignment is None or assignment.business is None:
            logger.warning("Business not found for number", extra={"to": to_number})
            return None
        return assignment.business

    async def resolve(self, to_number: str | None) -> TenantResolution:
        """Resolve a called number to business and active agent."""
        business = await self.find_business(to_number)
        if business is None:
            return TenantResolution(status=ResolutionStatus.NUMBER_NOT_FOUND)

        agent = await self.business_repo.get_active_agent(business.id)
        if agent is None:
            logger.error("No active AI agent found", extra={"business_id": business.id})
            return TenantResolution(status=ResolutionStatus.AGENT_NOT_FOUND, business=business)

        return TenantResolution(status=ResolutionStatus.RESOLVED, business=business, agent=agent)

    async def get_agent_voice(self, business_id: int) -> str | None:
        """Return the configured voice label of the active agent, if any."""
        agent = await self.business_repo.get_active_agent(business_id)
        return agent.voice if agent else None
