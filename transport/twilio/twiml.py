"""
TwiML rendering.

Twilio reads the webhook response body as TwiML. Only the minimal envelope
is produced: an empty acknowledgment, or one <Message> with the reply.
The twilio helper library serializes and escapes the markup.
"""

from fastapi.responses import Response
from twilio.twiml.messaging_response import MessagingResponse

TWIML_MEDIA_TYPE = "application/xml"
EMPTY_TWIML = str(MessagingResponse())


def render_message(reply: str) -> str:
    twiml = MessagingResponse()
    twiml.message(reply)
    return str(twiml)


def twiml_response(body: str = EMPTY_TWIML) -> Response:
    return Response(content=body, media_type=TWIML_MEDIA_TYPE)
