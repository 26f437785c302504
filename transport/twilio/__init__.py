"""Twilio WhatsApp Transport Layer - Module Exports"""

from .normalize import (
    UNKNOWN_THREAD_ID,
    derive_thread_id,
    normalize_message,
    parse_form,
)
from .schemas import TransportContext, TwilioInboundMessage
from .security import SIGNATURE_HEADER, compute_signature, verify_signature
from .twiml import EMPTY_TWIML, render_message, twiml_response
from .webhook import WebhookSettings, get_webhook_settings, router

__all__ = [
    # Schemas
    "TwilioInboundMessage",
    "TransportContext",
    # Normalization
    "parse_form",
    "derive_thread_id",
    "normalize_message",
    "UNKNOWN_THREAD_ID",
    # Security
    "SIGNATURE_HEADER",
    "compute_signature",
    "verify_signature",
    # TwiML
    "EMPTY_TWIML",
    "twiml_response",
    "render_message",
    # Router
    "WebhookSettings",
    "get_webhook_settings",
    "router",
]
