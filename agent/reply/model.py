"""
Model-backed reply generator.

Wraps a synchronous ModelBackend. The backend call runs in a worker thread
so a slow model never blocks the event loop; the pipeline bounds the wait.
"""

import asyncio
import logging

from agent.errors import ReplyGenerationError
from agent.prompting import build_messages
from agent.reply.base import ReplyGenerator
from agent.state_schema import ReplyRequest
from inference import ModelBackend, ModelRequest

logger = logging.getLogger(__name__)


class ModelReplyGenerator(ReplyGenerator):
    """Builds chat messages from the transcript and asks the model backend."""

    name = "model"

    def __init__(self, backend: ModelBackend, timeout_s: float = 20.0):
        self.backend = backend
        self.timeout_s = timeout_s

    async def generate(self, request: ReplyRequest) -> str:
        model_request = ModelRequest(
            task="respond",
            messages=build_messages(
                request.incoming_message,
                history=request.history,
                profile_name=request.profile_name,
            ),
            timeout_s=self.timeout_s,
            thread_id=request.thread_id,
        )

        response = await asyncio.to_thread(self.backend.generate, model_request)

        if response.status != "success" or not (response.output or "").strip():
            logger.warning(
                f"Model backend returned {response.status}",
                extra={
                    "thread_id": request.thread_id,
                    "error_type": response.error_type,
                    "backend": (response.metadata or {}).get("backend"),
                }
            )
            raise ReplyGenerationError(
                f"Model backend failed with status {response.status}",
                error_type=response.error_type or "invalid_output",
            )

        return response.output.strip()
