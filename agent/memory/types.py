"""
Conversation store types.

A Message is one entry of a thread's transcript. Messages are immutable
once created; the store owns them and hands out copies of the sequence.
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Literal, get_args

Role = Literal["user", "assistant"]

_ROLES = frozenset(get_args(Role))


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Message:
    """Single transcript entry."""

    role: Role                                      # user | assistant
    content: str                                    # never empty
    timestamp: int = field(default_factory=now_millis)  # epoch millis

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise ValueError(f"Unknown message role: {self.role!r}")
        if not self.content:
            raise ValueError("Message content must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation used by the web channel."""
        return asdict(self)
