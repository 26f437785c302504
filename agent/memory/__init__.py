"""
Conversation store exports.

Clean interface for the pipeline to import store components.
"""

from agent.memory.base import ConversationStore
from agent.memory.in_memory import InMemoryConversationStore
from agent.memory.sqlite import SQLiteConversationStore
from agent.memory.types import Message, Role, now_millis

__all__ = [
    "ConversationStore",
    "InMemoryConversationStore",
    "SQLiteConversationStore",
    "Message",
    "Role",
    "now_millis",
]
