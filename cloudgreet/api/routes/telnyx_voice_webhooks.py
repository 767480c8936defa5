"""Telnyx call-control voice webhook."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from cloudgreet.api.deps import get_signature_verifier, get_voice_call_dispatcher
from cloudgreet.core.errors import InvalidWebhookError
from cloudgreet.core.webhook_signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, TelnyxSignatureVerifier
from cloudgreet.domain.models.call_event import TelnyxWebhook
from cloudgreet.domain.services.voice_call_dispatcher import VoiceCallDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/voice-webhook")
async def telnyx_voice_webhook(
    request: Request,
    dispatcher: Annotated[VoiceCallDispatcher, Depends(get_voice_call_dispatcher)],
    verifier: Annotated[TelnyxSignatureVerifier | None, Depends(get_signature_verifier)],
) -> JSONResponse:
    """Handle a Telnyx call-control webhook.

    The response body carries the call-control actions Telnyx should run
    next, or a status acknowledgement for events that need none.
    """
    raw_body = await request.body()

    if verifier is not None and not verifier.verify(
        raw_body,
        request.headers.get(SIGNATURE_HEADER),
        request.headers.get(TIMESTAMP_HEADER),
    ):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Invalid webhook signature"},
        )

    try:
        webhook = TelnyxWebhook.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning(f"Invalid webhook structure: {e.error_count()} errors", extra={"body_length": len(raw_body)})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid webhook structure"},
        )

    try:
        result = await dispatcher.dispatch(webhook.data)
    except InvalidWebhookError as e:
        logger.warning(f"Invalid webhook structure: {e}", extra={"event_type": webhook.data.event_type})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid webhook structure"},
        )
    except Exception as e:
        logger.error(
            f"Telnyx voice webhook error: {type(e).__name__}: {e}",
            exc_info=True,
            extra={"event_type": webhook.data.event_type},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": "Internal server error"},
        )

    return JSONResponse(status_code=result.status_code, content=result.body)
