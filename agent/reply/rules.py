"""
Rule-based reply generator.

Used when no model backend is configured. Deterministic and never raises.
"""

import re
from typing import Optional

from agent.reply.base import ReplyGenerator
from agent.state_schema import ReplyRequest

_GREETING_RE = re.compile(r"^(hi|hello|hey|hola|good (morning|afternoon|evening))\b", re.IGNORECASE)
_THANKS_RE = re.compile(r"\b(thanks|thank you|thx|gracias)\b", re.IGNORECASE)
_HELP_RE = re.compile(r"\b(help|menu|options)\b", re.IGNORECASE)
_HUMAN_RE = re.compile(r"\b(human|agent|person|operator)\b", re.IGNORECASE)

_ECHO_LIMIT = 160

HELP_TEXT = (
    "I can answer questions, take a message for the team, or connect you "
    "with a person. Just tell me what you need."
)


class RuleBasedReplyGenerator(ReplyGenerator):
    """
    Keyword rules, first match wins:
    - greeting  -> greeting (by name when the provider sent one)
    - help      -> capabilities summary
    - human     -> hand-off acknowledgement
    - thanks    -> closing line
    - otherwise -> acknowledgement quoting the message
    """

    name = "rules"

    async def generate(self, request: ReplyRequest) -> str:
        return self.reply_for(request.incoming_message, request.profile_name, request.history)

    def reply_for(self, text: str, profile_name: Optional[str] = None, history=()) -> str:
        name = f" {profile_name}" if profile_name else ""

        if _GREETING_RE.search(text):
            if history:
                return f"Welcome back{name}! How can I help you today?"
            return f"Hi{name}! I'm your WhatsApp concierge. How can I help you today?"

        if _HELP_RE.search(text):
            return HELP_TEXT

        if _HUMAN_RE.search(text):
            return "Got it. A member of the team will follow up with you here shortly."

        if _THANKS_RE.search(text):
            return f"You're welcome{name}! Anything else I can do for you?"

        quoted = text if len(text) <= _ECHO_LIMIT else text[:_ECHO_LIMIT].rstrip() + "..."
        return f'Thanks for your message: "{quoted}". Reply "help" to see what I can do.'
