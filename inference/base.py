from abc import ABC, abstractmethod
from .types import ModelRequest, ModelResponse


class ModelBackend(ABC):
    """
    Abstract model boundary.
    Reply generators depend ONLY on this interface.

    generate() is synchronous and must not raise: every failure is reported
    through ModelResponse.status and ModelResponse.error_type.
    """

    @abstractmethod
    def generate(self, request: ModelRequest) -> ModelResponse:
        """Generate a chat completion for request.messages."""
        raise NotImplementedError
