"""API routes."""

from fastapi import APIRouter

from cloudgreet.api.routes import ai_conversation, notifications, telnyx_voice_webhooks

api_router = APIRouter()

# Telnyx webhooks (signature-verified, no auth)
api_router.include_router(telnyx_voice_webhooks.router, prefix="/telnyx", tags=["telnyx-webhooks"])

# Internal endpoints called by the voice webhook
api_router.include_router(ai_conversation.router, prefix="/ai", tags=["ai"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
