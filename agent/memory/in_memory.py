"""
In-memory conversation store.

Default backend. Process-lifetime only, no external dependencies.
"""

import threading
from typing import Dict, List

from agent.memory.base import ConversationStore
from agent.memory.types import Message


class InMemoryConversationStore(ConversationStore):
    """
    Dict-of-lists store guarded by a single lock.

    Operations never suspend; the lock is held only for the dict/list
    operation itself.
    """

    def __init__(self):
        self._threads: Dict[str, List[Message]] = {}
        self._lock = threading.Lock()

    def append(self, thread_id: str, message: Message) -> None:
        with self._lock:
            self._threads.setdefault(thread_id, []).append(message)

    def read(self, thread_id: str) -> List[Message]:
        with self._lock:
            return list(self._threads.get(thread_id, ()))

    def reset(self, thread_id: str) -> None:
        with self._lock:
            self._threads.pop(thread_id, None)

    def __len__(self) -> int:
        """Number of threads with at least one message."""
        with self._lock:
            return len(self._threads)
