from .base import ModelBackend
from .types import ModelRequest, ModelResponse


class StubModelBackend(ModelBackend):
    """
    Offline stand-in for a chat model (REPLY_BACKEND=stub).

    Echoes the newest user message so a transcript can be followed end to
    end without network access. Same input, same reply.
    """

    def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Reply to the last user entry of request.messages.

        Args:
            request: ModelRequest with chat messages

        Returns:
            ModelResponse; recoverable_error when there is no user message
        """
        metadata = {
            "backend": "stub",
            "thread_id": request.thread_id,
            "message_count": len(request.messages),
        }

        last_user = next(
            (m.get("content", "") for m in reversed(request.messages) if m.get("role") == "user"),
            "",
        ).strip()

        if not last_user:
            return ModelResponse(
                status="recoverable_error",
                error_type="invalid_output",
                metadata=metadata,
            )

        turns = sum(1 for m in request.messages if m.get("role") == "user")
        return ModelResponse(
            status="success",
            output=f'[stub reply #{turns}] You said: "{last_user}"',
            metadata=metadata,
        )
