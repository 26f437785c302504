"""
Twilio Input Normalization

PURE CONVERSION - NO LOGIC, NO MODEL CALLS

Converts a Twilio webhook form into the canonical TurnRequest.
The pipeline never knows the source was WhatsApp.
"""

from typing import Mapping

from agent.state_schema import TurnRequest

from .schemas import TwilioInboundMessage

UNKNOWN_THREAD_ID = "unknown"


def parse_form(params: Mapping[str, str]) -> TwilioInboundMessage:
    """Validate the raw form into TwilioInboundMessage."""
    return TwilioInboundMessage.model_validate(dict(params))


def derive_thread_id(message: TwilioInboundMessage) -> str:
    """
    Thread identity by preference: WaId, then From, then "unknown".
    Blank candidates are skipped.

    Never returns an empty string.
    """
    return (
        (message.wa_id or "").strip()
        or (message.from_ or "").strip()
        or UNKNOWN_THREAD_ID
    )


def normalize_message(message: TwilioInboundMessage) -> TurnRequest:
    """
    Convert an inbound Twilio message into a TurnRequest.

    Rules:
    - Body is passed through; trimming happens in the pipeline
    - ProfileName becomes the profile hint, blank names are dropped
    """
    profile_name = (message.profile_name or "").strip() or None

    return TurnRequest(
        thread_id=derive_thread_id(message),
        text=message.body,
        profile_name=profile_name,
        channel="whatsapp",
    )
