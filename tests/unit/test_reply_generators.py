"""
Tests for the reply generators.

Verifies:
- Rule-based replies are deterministic and keyword-driven
- ModelReplyGenerator sends system + history + incoming message to the backend
- ModelReplyGenerator raises ReplyGenerationError on backend failure
"""

from unittest.mock import MagicMock

import pytest

from agent.errors import ReplyGenerationError
from agent.memory import Message
from agent.reply import ModelReplyGenerator, RuleBasedReplyGenerator
from agent.reply.rules import HELP_TEXT
from agent.state_schema import ReplyRequest
from inference import ModelResponse, StubModelBackend


def request_for(text, history=(), profile_name=None):
    return ReplyRequest(
        thread_id="t1",
        incoming_message=text,
        history=tuple(history),
        profile_name=profile_name,
    )


class TestRuleBasedReplyGenerator:

    @pytest.mark.asyncio
    async def test_greeting_uses_profile_name(self):
        reply = await RuleBasedReplyGenerator().generate(request_for("Hello!", profile_name="Ana"))
        assert reply.startswith("Hi Ana!")

    @pytest.mark.asyncio
    async def test_greeting_without_name(self):
        reply = await RuleBasedReplyGenerator().generate(request_for("hey there"))
        assert reply.startswith("Hi!")

    @pytest.mark.asyncio
    async def test_returning_user_greeting(self):
        history = [Message(role="user", content="x"), Message(role="assistant", content="y")]
        reply = await RuleBasedReplyGenerator().generate(request_for("hi", history=history))
        assert reply.startswith("Welcome back")

    @pytest.mark.asyncio
    async def test_help(self):
        reply = await RuleBasedReplyGenerator().generate(request_for("what are my options?"))
        assert reply == HELP_TEXT

    @pytest.mark.asyncio
    async def test_human_handoff(self):
        reply = await RuleBasedReplyGenerator().generate(request_for("can I talk to a human"))
        assert "team" in reply

    @pytest.mark.asyncio
    async def test_thanks(self):
        reply = await RuleBasedReplyGenerator().generate(request_for("thanks a lot", profile_name="Bo"))
        assert reply.startswith("You're welcome Bo!")

    @pytest.mark.asyncio
    async def test_default_quotes_message(self):
        reply = await RuleBasedReplyGenerator().generate(request_for("where is my parcel"))
        assert '"where is my parcel"' in reply

    @pytest.mark.asyncio
    async def test_default_truncates_long_message(self):
        reply = await RuleBasedReplyGenerator().generate(request_for("z" * 500))
        assert "z" * 160 + "..." in reply
        assert "z" * 161 not in reply

    @pytest.mark.asyncio
    async def test_deterministic(self):
        generator = RuleBasedReplyGenerator()
        first = await generator.generate(request_for("anything"))
        second = await generator.generate(request_for("anything"))
        assert first == second


class TestModelReplyGenerator:

    @pytest.mark.asyncio
    async def test_stub_backend_reply(self):
        generator = ModelReplyGenerator(backend=StubModelBackend())

        reply = await generator.generate(request_for("hello"))

        assert reply == '[stub reply #1] You said: "hello"'

    @pytest.mark.asyncio
    async def test_backend_receives_chat_messages(self):
        backend = MagicMock()
        backend.generate.return_value = ModelResponse(status="success", output="  sure  ")
        generator = ModelReplyGenerator(backend=backend, timeout_s=5)
        history = [Message(role="user", content="first"), Message(role="assistant", content="ok")]

        reply = await generator.generate(request_for("second", history=history, profile_name="Ana"))

        assert reply == "sure"
        model_request = backend.generate.call_args.args[0]
        assert model_request.task == "respond"
        assert model_request.timeout_s == 5
        assert model_request.thread_id == "t1"
        assert model_request.messages[0]["role"] == "system"
        assert "Ana" in model_request.messages[0]["content"]
        assert [m["content"] for m in model_request.messages[1:]] == ["first", "ok", "second"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            ModelResponse(status="recoverable_error", error_type="timeout"),
            ModelResponse(status="fatal_error", error_type="backend_unavailable"),
            ModelResponse(status="success", output="   "),
            ModelResponse(status="success", output=None),
        ],
    )
    async def test_backend_failure_raises(self, response):
        backend = MagicMock()
        backend.generate.return_value = response
        generator = ModelReplyGenerator(backend=backend)

        with pytest.raises(ReplyGenerationError):
            await generator.generate(request_for("hello"))

    @pytest.mark.asyncio
    async def test_error_type_carried(self):
        backend = MagicMock()
        backend.generate.return_value = ModelResponse(status="recoverable_error", error_type="timeout")

        with pytest.raises(ReplyGenerationError) as exc_info:
            await ModelReplyGenerator(backend=backend).generate(request_for("hello"))

        assert exc_info.value.error_type == "timeout"
