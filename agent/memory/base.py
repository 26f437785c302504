"""
Abstract conversation store interface.

The store is the only shared mutable resource of the gateway.
Pipeline code depends ONLY on this interface, not on specific implementations.
"""

from abc import ABC, abstractmethod
from typing import List

from agent.memory.types import Message


class ConversationStore(ABC):
    """
    Thread-keyed, append-only message log with reset.

    Key properties:
    - All operations are total: no error channel, unknown threads are empty
    - Appends for one thread keep insertion order
    - Threads are created implicitly on first append
    - read() returns a copy; callers can never mutate stored history
    """

    @abstractmethod
    def append(self, thread_id: str, message: Message) -> None:
        """
        Add a message to the end of a thread's transcript.

        Creates the thread if it does not exist yet. The get-or-create step
        happens inside the same critical section as the append.
        """
        raise NotImplementedError

    @abstractmethod
    def read(self, thread_id: str) -> List[Message]:
        """
        Return the full ordered transcript of a thread.

        Unknown threads yield an empty list. The returned list is a fresh copy.
        """
        raise NotImplementedError

    @abstractmethod
    def reset(self, thread_id: str) -> None:
        """Clear a thread's transcript. Idempotent."""
        raise NotImplementedError
