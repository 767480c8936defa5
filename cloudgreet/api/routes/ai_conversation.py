"""AI conversation endpoint used by the voice webhook."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.api.deps import get_llm
from cloudgreet.api.schemas.conversation import ConversationVoiceRequest
from cloudgreet.core.call_context import set_call_context
from cloudgreet.core.errors import NotFoundError
from cloudgreet.domain.services.voice_conversation_service import FAILURE_APOLOGY, VoiceConversationService
from cloudgreet.llm.client import LLMClient
from cloudgreet.persistence.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/conversation-voice", response_model=None)
async def conversation_voice(
    request: ConversationVoiceRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    llm_client: Annotated[LLMClient, Depends(get_llm)],
) -> dict[str, Any] | JSONResponse:
    """Generate the receptionist's next line for a phone call.

    Failures after validation still answer 200 with ``shouldTransfer`` so
    the caller hears an apology instead of dead air.
    """
    if not request.business_id:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Business ID required"},
        )

    set_call_context(request.call_id, request.business_id)
    service = VoiceConversationService(db, llm_client)

    try:
        result = await service.respond(
            business_id=request.business_id,
            message=request.message,
            conversation_history=request.conversation_history,
            caller_name=request.caller_name,
            caller_phone=request.caller_phone,
            call_id=request.call_id,
            call_context=request.call_context,
        )
    except NotFoundError as e:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": str(e)},
        )
    except Exception as e:
        logger.error(f"Voice AI conversation error: {type(e).__name__}: {e}", exc_info=True)
        return {"success": True, "response": FAILURE_APOLOGY, "shouldTransfer": True}

    return {
        "success": True,
        "response": result.response,
        "appointmentBooked": result.appointment_booked,
        "conversationId": result.conversation_id,
        "timestamp": result.timestamp,
    }
