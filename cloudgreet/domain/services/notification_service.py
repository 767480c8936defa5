"""Business owner notifications."""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.core.errors import NotFoundError, PersistenceError
from cloudgreet.persistence.models.notification import Notification, NotificationPriority
from cloudgreet.persistence.repositories.base import BaseRepository
from cloudgreet.persistence.repositories.business_repository import BusinessRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Stores in-app notifications for business owners."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize notification service."""
        self.session = session
        self.business_repo = BusinessRepository(session)
        self.notification_repo: BaseRepository[Notification] = BaseRepository(Notification, session)

    async def notify(
        self,
        business_id: int,
        notification_type: str,
        message: str,
        priority: str = NotificationPriority.NORMAL,
        extra_data: dict[str, Any] | None = None,
    ) -> Notification:
        """Persist a notification for a business.

        Args:
            business_id: Business to notify
            notification_type: e.g. ``call_completed`` or ``client_booking``
            message: Text shown to the owner
            priority: low, normal, high or urgent
            extra_data: Optional references (call_id, appointment_id, ...)

        Returns:
            The stored Notification

        Raises:
            NotFoundError: If the business does not exist
            PersistenceError: If the row cannot be written
        """
        business = await self.business_repo.get(business_id)
        if business is None:
            raise NotFoundError(f"Business {business_id} not found")

        try:
            notification = await self.notification_repo.create(
                business_id,
                notification_type=notification_type,
                message=message,
                priority=priority or NotificationPriority.NORMAL,
                extra_data=extra_data,
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(
                f"Failed to store notification: {type(e).__name__}", business_id=business_id
            ) from e

        logger.info(
            f"Notification stored for business {business_id}",
            extra={
                "business_id": business_id,
                "notification_type": notification_type,
                "priority": notification.priority,
                "notification_id": notification.id,
            },
        )
        return notification
