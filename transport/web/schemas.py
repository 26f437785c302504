"""
Web Chat Transport - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Contract between the browser chat widget and the gateway.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from agent.memory import Message


class WebChatRequest(BaseModel):
    """POST /api/agent body."""

    model_config = ConfigDict(populate_by_name=True)

    thread_id: Optional[str] = Field(None, alias="threadId")
    message: Optional[str] = None
    reset: Optional[bool] = False


class MessagePayload(BaseModel):
    """One transcript entry as the widget renders it."""

    role: str
    content: str
    timestamp: int

    @classmethod
    def from_message(cls, message: Message) -> "MessagePayload":
        return cls(**message.to_dict())


class WebChatResponse(BaseModel):
    """Successful turn."""

    reply: str
    history: List[MessagePayload]


class WebResetResponse(BaseModel):
    """Successful reset."""

    ok: bool = True
    history: List[MessagePayload] = Field(default_factory=list)


class WebErrorResponse(BaseModel):
    """Rejected request."""

    error: str
    code: str
