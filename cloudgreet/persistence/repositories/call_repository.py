"""Call repository."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.core.errors import PersistenceError
from cloudgreet.persistence.models.call import Call
from cloudgreet.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CallRepository(BaseRepository[Call]):
    """Repository for Call entities.

    Every write goes through here and turns driver errors into
    ``PersistenceError`` carrying the call control ID.
    """

    def __init__(self, session: AsyncSession):
        """Initialize call repository."""
        super().__init__(Call, session)

    async def get_by_call_id(self, call_id: str) -> Call | None:
        """Get call by Telnyx call control ID.

        Args:
            call_id: Telnyx call control ID

        Returns:
            Call entity or None if not found
        """
        try:
            stmt = select(Call).where(Call.call_id == call_id).execution_options(populate_existing=True)
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load call: {type(e).__name__}", call_control_id=call_id) from e

    async def get_or_create(self, call_id: str, business_id: int, **data: Any) -> tuple[Call, bool]:
        """Return the call row for ``call_id``, inserting it if missing.

        A concurrent insert of the same call ID loses on the unique constraint
        and gets the winner's row back.

        Returns:
            Tuple of (call, created)
        """
        existing = await self.get_by_call_id(call_id)
        if existing is not None:
            return existing, False

        try:
            return await self.create(business_id, call_id=call_id, **data), True
        except IntegrityError:
            await self.session.rollback()
            existing = await self.get_by_call_id(call_id)
            if existing is None:
                raise PersistenceError(
                    "Call insert conflicted but no row exists",
                    call_control_id=call_id,
                    business_id=business_id,
                )
            logger.info("Call row created by a concurrent delivery", extra={"call_control_id": call_id})
            return existing, False
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(
                f"Failed to create call: {type(e).__name__}",
                call_control_id=call_id,
                business_id=business_id,
            ) from e

    async def update_if_status(
        self,
        call_id: str,
        allowed_statuses: tuple[str, ...] | None,
        **values: Any,
    ) -> bool:
        """Update a call only while it is in one of ``allowed_statuses``.

        The status check and the write are a single UPDATE statement, so two
        overlapping deliveries for the same call cannot both apply a
        transition.

        Args:
            call_id: Telnyx call control ID
            allowed_statuses: Statuses the row must currently have, or None
                to update regardless of status
            values: Column values to set

        Returns:
            True if a row was updated
        """
        values["updated_at"] = datetime.utcnow()
        stmt = update(Call).where(Call.call_id == call_id)
        if allowed_statuses is not None:
            stmt = stmt.where(Call.status.in_(allowed_statuses))
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to update call: {type(e).__name__}", call_control_id=call_id) from e

        return result.rowcount > 0
