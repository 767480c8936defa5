"""Business owner notification endpoint."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.api.schemas.notification import NotificationSendRequest
from cloudgreet.core.errors import NotFoundError
from cloudgreet.domain.services.notification_service import NotificationService
from cloudgreet.persistence.database import get_db

router = APIRouter()


@router.post("/send", response_model=None)
async def send_notification(
    request: NotificationSendRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, Any] | JSONResponse:
    """Store a notification for a business owner."""
    if not request.business_id or not request.message:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "businessId and message are required"},
        )

    try:
        notification = await NotificationService(db).notify(
            request.business_id,
            request.type,
            request.message,
            priority=request.priority,
            extra_data=request.extra_data,
        )
    except NotFoundError as e:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": str(e)},
        )

    return {"success": True, "notificationId": notification.id}
