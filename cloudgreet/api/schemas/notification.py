"""Notification endpoint schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cloudgreet.persistence.models.notification import NotificationPriority, NotificationType


class NotificationSendRequest(BaseModel):
    """Notification for a business owner."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = NotificationType.SYSTEM
    message: str | None = None
    business_id: int | None = Field(default=None, alias="businessId")
    priority: str = NotificationPriority.NORMAL
    extra_data: dict[str, Any] | None = Field(default=None, alias="extraData")
