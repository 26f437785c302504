"""
Abstract reply generator interface.

The pipeline depends only on this interface. Whether a reply comes from a
language model or from a rule set is invisible to it.
"""

from abc import ABC, abstractmethod

from agent.state_schema import ReplyRequest


class ReplyGenerator(ABC):
    """
    Produces the assistant reply for one turn.

    Contract:
    - Receives a read-only ReplyRequest (history is a tuple of frozen messages)
    - Returns non-empty reply text
    - May raise ReplyGenerationError; the pipeline recovers with a fallback
    """

    name: str = "base"

    @abstractmethod
    async def generate(self, request: ReplyRequest) -> str:
        """Generate the reply text for request.incoming_message."""
        raise NotImplementedError
