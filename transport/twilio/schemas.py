"""
Twilio Transport Layer - Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between Twilio's WhatsApp webhook and the pipeline.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# TWILIO WEBHOOK FORM (INPUT)
# ============================================================================

class TwilioInboundMessage(BaseModel):
    """
    Fields of a Twilio WhatsApp webhook POST that the gateway uses.

    ref: https://www.twilio.com/docs/messaging/guides/webhook-request
    """

    model_config = ConfigDict(extra="allow")  # Twilio sends many more fields

    body: str = Field("", alias="Body", description="Message text")
    from_: str = Field("", alias="From", description="Sender, e.g. whatsapp:+15551234567")
    wa_id: str = Field("", alias="WaId", description="WhatsApp subscriber id")
    profile_name: Optional[str] = Field(
        None, alias="ProfileName", description="Display name, if shared"
    )
    message_sid: Optional[str] = Field(None, alias="MessageSid")


# ============================================================================
# OBSERVABILITY CONTEXT
# ============================================================================

@dataclass(frozen=True)
class TransportContext:
    """
    Context metadata about the transport.

    Used for logging/observability only.
    Never passed to the reply generator.
    """

    thread_id: str
    message_sid: Optional[str]
    signature_verified: bool     # False when no auth token is configured
    received_at: datetime

    def as_log_extra(self) -> dict:
        return {
            "thread_id": self.thread_id,
            "message_sid": self.message_sid,
            "signature_verified": self.signature_verified,
        }
