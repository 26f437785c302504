"""
Conversation Pipeline

Single request-handling state machine shared by every channel:

    Received -> Validated -> Generating -> Replied -> Completed
       |            |             |
       |            |             +-> Replied-with-fallback (error / timeout / empty)
       |            +-> Rejected (empty message)
       +-> Rejected (no thread id) | Reset-done

Side effects are strictly ordered: the user message is stored before
generation starts and the assistant message only after it ends. The whole
turn runs under the thread's lock, so two turns on one thread never
interleave and each user/assistant pair stays adjacent in the transcript.
"""

import asyncio
import logging
from typing import Optional

from agent.errors import BadRequestError
from agent.locks import ThreadLocks
from agent.memory import ConversationStore, Message
from agent.reply import ReplyGenerator
from agent.state_schema import ReplyRequest, TurnRequest, TurnResult

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_REPLY = (
    "Sorry, I'm having trouble answering right now. Please try again in a moment."
)
DEFAULT_REPLY_TIMEOUT_S = 20.0


class ConversationPipeline:
    """
    Orchestrates one turn: validate, append user, generate, append assistant.

    The store and the reply generator are injected; the pipeline owns no
    conversation data of its own.
    """

    def __init__(
        self,
        store: ConversationStore,
        generator: ReplyGenerator,
        reply_timeout_s: float = DEFAULT_REPLY_TIMEOUT_S,
        fallback_reply: str = DEFAULT_FALLBACK_REPLY,
        locks: Optional[ThreadLocks] = None,
    ):
        if not fallback_reply or not fallback_reply.strip():
            raise ValueError("fallback_reply must be non-empty")

        self.store = store
        self.generator = generator
        self.reply_timeout_s = reply_timeout_s
        self.fallback_reply = fallback_reply
        self.locks = locks or ThreadLocks()

    async def handle(self, request: TurnRequest) -> TurnResult:
        """
        Run one request through the state machine.

        Raises:
            BadRequestError: missing thread id, or empty message on a non-reset request

        Returns:
            TurnResult with status completed | fallback | reset
        """
        # Received
        thread_id = (request.thread_id or "").strip()
        if not thread_id:
            raise BadRequestError("missing_thread_id", "threadId is required")

        if request.reset:
            return await self.reset(thread_id)

        text = (request.text or "").strip()
        if not text:
            raise BadRequestError("missing_message", "message is required")

        # Validated
        async with self.locks.hold(thread_id):
            history = tuple(self.store.read(thread_id))
            self.store.append(thread_id, Message(role="user", content=text))

            # Generating
            reply, failure = await self._generate(
                ReplyRequest(
                    thread_id=thread_id,
                    incoming_message=text,
                    history=history,
                    profile_name=request.profile_name,
                )
            )

            # Replied
            self.store.append(thread_id, Message(role="assistant", content=reply))
            transcript = self.store.read(thread_id)

        status = "fallback" if failure else "completed"
        logger.info(
            f"Turn {status} on thread {thread_id}",
            extra={
                "thread_id": thread_id,
                "channel": request.channel,
                "history_length": len(transcript),
                "generator": self.generator.name,
            }
        )

        return TurnResult(
            status=status,
            thread_id=thread_id,
            reply=reply,
            history=transcript,
        )

    async def reset(self, thread_id: str) -> TurnResult:
        """Clear a thread. Idempotent."""
        async with self.locks.hold(thread_id):
            self.store.reset(thread_id)

        logger.info(f"Thread {thread_id} reset", extra={"thread_id": thread_id})
        return TurnResult(status="reset", thread_id=thread_id, history=[])

    async def _generate(self, request: ReplyRequest):
        """
        Call the reply generator under the timeout.

        Returns:
            (reply, failure_kind) where failure_kind is None on success,
            otherwise one of "timeout", "error", "empty"
        """
        try:
            reply = await asyncio.wait_for(
                self.generator.generate(request),
                timeout=self.reply_timeout_s,
            )
        except asyncio.TimeoutError:
            return self._fallback(request, "timeout")
        except Exception as e:
            logger.error(
                f"Reply generation failed: {e}",
                exc_info=True,
                extra={"thread_id": request.thread_id},
            )
            return self._fallback(request, "error")

        if not isinstance(reply, str) or not reply.strip():
            return self._fallback(request, "empty")

        return reply.strip(), None

    def _fallback(self, request: ReplyRequest, kind: str):
        logger.warning(
            f"Using fallback reply ({kind}) on thread {request.thread_id}",
            extra={
                "thread_id": request.thread_id,
                "failure_kind": kind,
                "generator": self.generator.name,
            }
        )
        return self.fallback_reply, kind
