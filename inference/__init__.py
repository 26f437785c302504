"""
Model boundary layer for LLM inference.

This package provides a clean abstraction for model invocation,
allowing the reply generator to remain agnostic of the underlying backend.

Supported backends:
- StubModelBackend: Deterministic fake model (default for CI/tests)
- OllamaModelBackend: Local Ollama inference
- OpenAIModelBackend: OpenAI chat completions (OPENAI_API_KEY)

Example usage:
    from inference import StubModelBackend, ModelRequest

    backend = StubModelBackend()
    request = ModelRequest(
        task="respond",
        messages=[{"role": "user", "content": "Hello, world!"}],
    )
    response = backend.generate(request)
"""

from .types import ModelRequest, ModelResponse, ModelStatus
from .base import ModelBackend
from .stub import StubModelBackend
from .ollama import OllamaModelBackend
from .openai import OpenAIModelBackend

__all__ = [
    "ModelRequest",
    "ModelResponse",
    "ModelStatus",
    "ModelBackend",
    "StubModelBackend",
    "OllamaModelBackend",
    "OpenAIModelBackend",
]
