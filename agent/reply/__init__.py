"""
Reply generation exports.
"""

from agent.reply.base import ReplyGenerator
from agent.reply.model import ModelReplyGenerator
from agent.reply.rules import RuleBasedReplyGenerator

__all__ = [
    "ReplyGenerator",
    "ModelReplyGenerator",
    "RuleBasedReplyGenerator",
]
