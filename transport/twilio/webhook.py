"""
Twilio WhatsApp Webhook Receiver

FastAPI router that receives Twilio WhatsApp messages and answers with TwiML.
Pure transport: decode, verify, hand the canonical request to the pipeline,
encode the reply. Transcript writes happen only in the pipeline.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse, Response

from agent.errors import BadRequestError
from agent.pipeline import ConversationPipeline
from config import Config
from infra.bootstrap import get_pipeline

from .normalize import normalize_message, parse_form
from .schemas import TransportContext
from .security import SIGNATURE_HEADER, verify_signature
from .twiml import render_message, twiml_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhook", tags=["WhatsApp Transport"])


@dataclass(frozen=True)
class WebhookSettings:
    """Values the webhook needs from configuration."""

    auth_token: str = ""
    webhook_url: Optional[str] = None


def get_webhook_settings() -> WebhookSettings:
    """FastAPI dependency: webhook settings from Config."""
    return WebhookSettings(
        auth_token=Config.TWILIO_AUTH_TOKEN,
        webhook_url=Config.TWILIO_WEBHOOK_URL,
    )


def resolve_webhook_url(request: Request, settings: WebhookSettings) -> str:
    """Configured public URL, or the request's own scheme://host/path."""
    if settings.webhook_url:
        return settings.webhook_url
    url = request.url
    return f"{url.scheme}://{url.netloc}{url.path}"


async def read_form_params(request: Request) -> Dict[str, str]:
    """
    Read the form body as a flat dict of string fields.

    Undecodable bodies yield an empty dict. Repeated keys keep the last value.
    """
    try:
        form = await request.form()
    except Exception as e:
        logger.warning(f"Could not decode webhook form: {e}")
        return {}

    return {key: value for key, value in form.multi_items() if isinstance(value, str)}


# ============================================================================
# LIVENESS
# ============================================================================

@router.get("/whatsapp")
async def whatsapp_webhook_status() -> dict:
    """Liveness check for the webhook route."""
    return {
        "status": "ok",
        "message": "WhatsApp webhook is ready to receive POST requests from Twilio.",
    }


# ============================================================================
# WEBHOOK RECEIVER (Message processing)
# ============================================================================

@router.post("/whatsapp")
async def whatsapp_webhook_receiver(
    request: Request,
    pipeline: ConversationPipeline = Depends(get_pipeline),
    settings: WebhookSettings = Depends(get_webhook_settings),
) -> Response:
    """
    Receive Twilio WhatsApp messages.

    Flow:
    1. Read form parameters
    2. Verify X-Twilio-Signature when an auth token is configured (403 if invalid)
    3. Normalize to TurnRequest
    4. Empty body -> empty TwiML acknowledgment, nothing stored
    5. Run the pipeline and answer with <Response><Message>...</Message></Response>

    Returns:
        TwiML (application/xml), or plain-text 403 on signature failure
    """

    # Step 1: Read form
    params = await read_form_params(request)

    # Step 2: Verify signature (security boundary)
    signature_verified = False
    if settings.auth_token:
        signature_verified = verify_signature(
            secret=settings.auth_token,
            provided_signature=request.headers.get(SIGNATURE_HEADER),
            url=resolve_webhook_url(request, settings),
            params=params,
        )
        if not signature_verified:
            logger.warning(
                "Invalid Twilio signature detected",
                extra={"client": request.client.host if request.client else None},
            )
            return PlainTextResponse(
                "Signature validation failed",
                status_code=status.HTTP_403_FORBIDDEN,
            )
    else:
        logger.warning("Twilio signature verification skipped: no auth token configured")

    # Step 3: Normalize to canonical form
    inbound = parse_form(params)
    turn = normalize_message(inbound)
    context = TransportContext(
        thread_id=turn.thread_id,
        message_sid=inbound.message_sid,
        signature_verified=signature_verified,
        received_at=datetime.now(timezone.utc),
    )

    # Step 4: Empty body is acknowledged, not an error
    if not (turn.text or "").strip():
        logger.debug("Empty WhatsApp message acknowledged", extra=context.as_log_extra())
        return twiml_response()

    # Step 5: Pipeline
    try:
        result = await pipeline.handle(turn)
    except BadRequestError as e:
        logger.warning(f"WhatsApp message rejected: {e.code}", extra=context.as_log_extra())
        return twiml_response()

    logger.info(
        "WhatsApp reply sent",
        extra={**context.as_log_extra(), "fallback": result.used_fallback},
    )
    return twiml_response(render_message(result.reply))
