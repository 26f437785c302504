"""
Pipeline state schema and types.

TurnRequest is the canonical, transport-agnostic form both channel adapters
decode into. TurnResult is what the pipeline hands back for encoding.
ReplyRequest is the read-only view given to the reply generator.
"""

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

from agent.memory.types import Message

TurnStatus = Literal["completed", "fallback", "reset"]


@dataclass(frozen=True)
class TurnRequest:
    """
    Canonical inbound request.

    Invariants:
    - thread_id is validated by the pipeline, not by adapters
    - text is trimmed by the pipeline before it is stored
    """

    thread_id: Optional[str]
    text: Optional[str] = None
    profile_name: Optional[str] = None   # display-name hint (webhook only)
    reset: bool = False
    channel: str = "web"                 # web | whatsapp (logging only)


@dataclass(frozen=True)
class ReplyRequest:
    """Input handed to the reply generator."""

    thread_id: str
    incoming_message: str
    history: Tuple[Message, ...] = ()    # transcript BEFORE this turn
    profile_name: Optional[str] = None


@dataclass
class TurnResult:
    """
    Outcome of one pipeline run.

    status:
    - completed: reply came from the generator
    - fallback: generator failed or timed out, fallback reply recorded
    - reset: thread was cleared, reply is None
    """

    status: TurnStatus
    thread_id: str
    reply: Optional[str] = None
    history: List[Message] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.status == "fallback"
