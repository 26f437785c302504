"""
Test suite for the conversation pipeline state machine.

Verifies:
- Rejected: missing thread id, empty/blank message
- Reset-done: reset clears the thread and needs no message
- Completed: user turn then assistant turn, text trimmed
- Generator sees history BEFORE this turn plus the profile hint
- Replied-with-fallback: generator raises, times out, or returns nothing
- Same-thread turns are serialized, pairs stay adjacent
- Different threads are not serialized against each other
"""

import asyncio

import pytest

from agent.errors import BadRequestError, ReplyGenerationError
from agent.memory import InMemoryConversationStore
from agent.pipeline import DEFAULT_FALLBACK_REPLY, ConversationPipeline
from agent.reply import ReplyGenerator
from agent.state_schema import ReplyRequest, TurnRequest


class RecordingGenerator(ReplyGenerator):
    """Echoes the message and remembers every request."""

    name = "recording"

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.requests = []

    async def generate(self, request: ReplyRequest) -> str:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        return f"echo: {request.incoming_message}"


class FailingGenerator(ReplyGenerator):
    name = "failing"

    async def generate(self, request: ReplyRequest) -> str:
        raise ReplyGenerationError("backend down")


class CrashingGenerator(ReplyGenerator):
    name = "crashing"

    async def generate(self, request: ReplyRequest) -> str:
        raise RuntimeError("unexpected")


class HangingGenerator(ReplyGenerator):
    name = "hanging"

    async def generate(self, request: ReplyRequest) -> str:
        await asyncio.sleep(10)
        return "too late"


class BlankGenerator(ReplyGenerator):
    name = "blank"

    async def generate(self, request: ReplyRequest) -> str:
        return "   "


def make_pipeline(generator, **kwargs):
    store = InMemoryConversationStore()
    return ConversationPipeline(store=store, generator=generator, **kwargs), store


class TestValidation:
    """Received -> Rejected."""

    @pytest.mark.asyncio
    async def test_missing_thread_id_rejected(self):
        pipeline, store = make_pipeline(RecordingGenerator())

        with pytest.raises(BadRequestError) as exc_info:
            await pipeline.handle(TurnRequest(thread_id=None, text="hello"))

        assert exc_info.value.code == "missing_thread_id"

    @pytest.mark.asyncio
    async def test_blank_thread_id_rejected(self):
        pipeline, store = make_pipeline(RecordingGenerator())

        with pytest.raises(BadRequestError) as exc_info:
            await pipeline.handle(TurnRequest(thread_id="   ", text="hello"))

        assert exc_info.value.code == "missing_thread_id"

    @pytest.mark.asyncio
    async def test_missing_thread_id_checked_before_reset(self):
        pipeline, store = make_pipeline(RecordingGenerator())

        with pytest.raises(BadRequestError):
            await pipeline.handle(TurnRequest(thread_id="", reset=True))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   \n\t"])
    async def test_empty_message_rejected(self, text):
        generator = RecordingGenerator()
        pipeline, store = make_pipeline(generator)

        with pytest.raises(BadRequestError) as exc_info:
            await pipeline.handle(TurnRequest(thread_id="t1", text=text))

        assert exc_info.value.code == "missing_message"
        assert store.read("t1") == []
        assert generator.requests == []

    def test_bad_request_to_dict(self):
        error = BadRequestError("missing_message", "message is required")
        assert error.to_dict() == {"error": "message is required", "code": "missing_message"}

    def test_empty_fallback_reply_refused(self):
        with pytest.raises(ValueError):
            ConversationPipeline(
                store=InMemoryConversationStore(),
                generator=RecordingGenerator(),
                fallback_reply="  ",
            )


class TestReset:
    """Received -> Reset-done."""

    @pytest.mark.asyncio
    async def test_reset_clears_thread(self):
        pipeline, store = make_pipeline(RecordingGenerator())
        await pipeline.handle(TurnRequest(thread_id="t1", text="hello"))

        result = await pipeline.handle(TurnRequest(thread_id="t1", reset=True))

        assert result.status == "reset"
        assert result.reply is None
        assert result.history == []
        assert store.read("t1") == []

    @pytest.mark.asyncio
    async def test_reset_ignores_message(self):
        generator = RecordingGenerator()
        pipeline, store = make_pipeline(generator)

        await pipeline.handle(TurnRequest(thread_id="t1", text="ignored", reset=True))

        assert store.read("t1") == []
        assert generator.requests == []

    @pytest.mark.asyncio
    async def test_reset_twice(self):
        pipeline, store = make_pipeline(RecordingGenerator())

        await pipeline.handle(TurnRequest(thread_id="t1", reset=True))
        await pipeline.handle(TurnRequest(thread_id="t1", reset=True))

        assert store.read("t1") == []


class TestCompletedTurn:
    """Validated -> Generating -> Replied -> Completed."""

    @pytest.mark.asyncio
    async def test_turn_appends_user_then_assistant(self):
        pipeline, store = make_pipeline(RecordingGenerator())

        result = await pipeline.handle(TurnRequest(thread_id="t1", text="hello"))

        assert result.status == "completed"
        assert result.reply == "echo: hello"
        assert not result.used_fallback
        assert [(m.role, m.content) for m in result.history] == [
            ("user", "hello"),
            ("assistant", "echo: hello"),
        ]
        assert store.read("t1") == result.history

    @pytest.mark.asyncio
    async def test_message_and_thread_id_trimmed(self):
        generator = RecordingGenerator()
        pipeline, store = make_pipeline(generator)

        result = await pipeline.handle(TurnRequest(thread_id=" t1 ", text="  hello  "))

        assert result.thread_id == "t1"
        assert store.read("t1")[0].content == "hello"
        assert generator.requests[0].incoming_message == "hello"

    @pytest.mark.asyncio
    async def test_generator_sees_history_before_turn(self):
        generator = RecordingGenerator()
        pipeline, store = make_pipeline(generator)

        await pipeline.handle(TurnRequest(thread_id="t1", text="first"))
        await pipeline.handle(TurnRequest(thread_id="t1", text="second"))

        first, second = generator.requests
        assert first.history == ()
        assert [m.content for m in second.history] == ["first", "echo: first"]
        assert isinstance(second.history, tuple)

    @pytest.mark.asyncio
    async def test_profile_hint_forwarded(self):
        generator = RecordingGenerator()
        pipeline, store = make_pipeline(generator)

        await pipeline.handle(
            TurnRequest(thread_id="t1", text="hi", profile_name="Ana", channel="whatsapp")
        )

        assert generator.requests[0].profile_name == "Ana"
        assert generator.requests[0].thread_id == "t1"

    @pytest.mark.asyncio
    async def test_result_history_is_a_copy(self):
        pipeline, store = make_pipeline(RecordingGenerator())

        result = await pipeline.handle(TurnRequest(thread_id="t1", text="hello"))
        result.history.clear()

        assert len(store.read("t1")) == 2


class TestFallback:
    """Generating -> Replied-with-fallback."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("generator", [FailingGenerator(), CrashingGenerator(), BlankGenerator()])
    async def test_generator_failure_uses_fallback(self, generator):
        pipeline, store = make_pipeline(generator)

        result = await pipeline.handle(TurnRequest(thread_id="t1", text="hello"))

        assert result.status == "fallback"
        assert result.used_fallback
        assert result.reply == DEFAULT_FALLBACK_REPLY
        assert [(m.role, m.content) for m in store.read("t1")] == [
            ("user", "hello"),
            ("assistant", DEFAULT_FALLBACK_REPLY),
        ]

    @pytest.mark.asyncio
    async def test_timeout_uses_fallback(self):
        pipeline, store = make_pipeline(HangingGenerator(), reply_timeout_s=0.05)

        result = await asyncio.wait_for(
            pipeline.handle(TurnRequest(thread_id="t1", text="hello")),
            timeout=2,
        )

        assert result.status == "fallback"
        assert len(store.read("t1")) == 2
        assert len(pipeline.locks) == 0

    @pytest.mark.asyncio
    async def test_custom_fallback_text(self):
        pipeline, store = make_pipeline(FailingGenerator(), fallback_reply="Back soon!")

        result = await pipeline.handle(TurnRequest(thread_id="t1", text="hello"))

        assert result.reply == "Back soon!"
        last = store.read("t1")[-1]
        assert (last.role, last.content) == ("assistant", "Back soon!")


class TestConcurrency:
    """Per-thread critical section."""

    @pytest.mark.asyncio
    async def test_same_thread_turns_stay_paired(self):
        pipeline, store = make_pipeline(RecordingGenerator(delay=0.02))

        await asyncio.gather(
            pipeline.handle(TurnRequest(thread_id="t1", text="a")),
            pipeline.handle(TurnRequest(thread_id="t1", text="b")),
            pipeline.handle(TurnRequest(thread_id="t1", text="c")),
        )

        transcript = store.read("t1")
        assert len(transcript) == 6
        for user, assistant in zip(transcript[0::2], transcript[1::2]):
            assert user.role == "user"
            assert assistant.role == "assistant"
            assert assistant.content == f"echo: {user.content}"
        assert len(pipeline.locks) == 0

    @pytest.mark.asyncio
    async def test_second_turn_sees_first_turn_in_history(self):
        generator = RecordingGenerator(delay=0.02)
        pipeline, store = make_pipeline(generator)

        await asyncio.gather(
            pipeline.handle(TurnRequest(thread_id="t1", text="a")),
            pipeline.handle(TurnRequest(thread_id="t1", text="b")),
        )

        first, second = generator.requests
        assert len(first.history) == 0
        assert len(second.history) == 2

    @pytest.mark.asyncio
    async def test_different_threads_run_in_parallel(self):
        """Thread A's generation waits for thread B's; serializing them would deadlock."""
        b_started = asyncio.Event()

        class RendezvousGenerator(ReplyGenerator):
            name = "rendezvous"

            async def generate(self, request: ReplyRequest) -> str:
                if request.thread_id == "a":
                    await b_started.wait()
                else:
                    b_started.set()
                return "ok"

        pipeline, store = make_pipeline(RendezvousGenerator())

        results = await asyncio.wait_for(
            asyncio.gather(
                pipeline.handle(TurnRequest(thread_id="a", text="one")),
                pipeline.handle(TurnRequest(thread_id="b", text="two")),
            ),
            timeout=2,
        )

        assert [r.status for r in results] == ["completed", "completed"]
