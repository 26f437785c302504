"""Web Chat Transport Layer - Module Exports"""

from .router import decode_request, router
from .schemas import (
    MessagePayload,
    WebChatRequest,
    WebChatResponse,
    WebErrorResponse,
    WebResetResponse,
)

__all__ = [
    "WebChatRequest",
    "WebChatResponse",
    "WebResetResponse",
    "WebErrorResponse",
    "MessagePayload",
    "decode_request",
    "router",
]
