"""Seed a demo business with an active AI agent and an assigned Telnyx number.

Usage: python seed_business.py +18005550100
"""

import asyncio
import sys
from datetime import datetime

from sqlalchemy import select

from cloudgreet.persistence.database import Database
from cloudgreet.persistence.models.business import AIAgent, Business
from cloudgreet.persistence.models.phone_number import PhoneNumberAssignment, PhoneNumberStatus
from cloudgreet.settings import settings


async def seed_business(number: str) -> None:
    database = Database(settings.async_database_url)
    if settings.environment == "development":
        await database.create_all()

    async with database.session_factory() as session:
        result = await session.execute(select(PhoneNumberAssignment).where(PhoneNumberAssignment.number == number))
        existing = result.scalar_one_or_none()

        if existing and existing.business_id:
            print(f"Number {number} already assigned to business {existing.business_id}")
            await database.dispose()
            return

        business = Business(
            business_name="Demo HVAC",
            business_type="HVAC",
            services=["Furnace repair", "AC installation"],
            service_areas=["Austin"],
        )
        session.add(business)
        await session.flush()

        session.add(
            AIAgent(
                business_id=business.id,
                agent_name="Sarah",
                greeting_message=f"Thank you for calling {business.business_name}. How can I help you today?",
                configuration={"voice": "nova", "personality": "friendly", "tone": "professional"},
                is_active=True,
            )
        )

        assignment = existing or PhoneNumberAssignment(number=number)
        assignment.business_id = business.id
        assignment.status = PhoneNumberStatus.ASSIGNED
        assignment.assigned_at = datetime.utcnow()
        session.add(assignment)

        await session.commit()
        print(f"Created business: {business.business_name} (ID: {business.id}) on {number}")

    await database.dispose()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(seed_business(sys.argv[1]))
