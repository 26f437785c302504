"""
Prompt Builder Layer
====================

Assembles chat-format prompts for the model backend.

Responsibilities:
- Defines the authoritative SYSTEM_PROMPT behavioral contract
- Turns a thread transcript + incoming message into chat messages
- Enforces hard limits on how much history is replayed to the model

Invariants:
- At most _MAX_HISTORY_MESSAGES prior messages are replayed, newest kept
- Replayed history never exceeds _MAX_HISTORY_CHARS characters in total
- The incoming message is never truncated and is always the last entry
- The system message is always first
"""

from typing import Dict, List, Optional, Sequence

from agent.memory.types import Message

# ── History Limits ───────────────────────────────────────────────────────────
_MAX_HISTORY_MESSAGES: int = 20   # ≈10 turns
_MAX_HISTORY_CHARS: int = 6000    # ≈1500 tokens of replayed transcript

# ── Behavioral Contract ───────────────────────────────────────────────────────
SYSTEM_PROMPT = """You are a friendly WhatsApp concierge.

Core Behavior:
- Keep replies short enough to read on a phone (max 4 sentences).
- Answer in the language the user writes in.
- Plain text only. No markdown, no tables.
- If you do not know something, say so and offer to connect a human.
- Never invent order numbers, prices or appointments."""


def build_messages(
    incoming_message: str,
    history: Sequence[Message] = (),
    profile_name: Optional[str] = None,
    system_prompt: str = SYSTEM_PROMPT,
) -> List[Dict[str, str]]:
    """
    Assemble the chat message list for one turn.

    Args:
        incoming_message: Trimmed user text for this turn.
        history: Transcript before this turn, oldest first.
        profile_name: Optional display name reported by the provider.
        system_prompt: Behavioral contract for the system role.

    Returns:
        List of {"role", "content"} dicts ready for ModelRequest.messages.
    """
    system_content = system_prompt
    if profile_name:
        system_content += f"\n\nThe user's name is {profile_name}."

    messages: List[Dict[str, str]] = [{"role": "system", "content": system_content}]
    messages.extend(_trim_history(history))
    messages.append({"role": "user", "content": incoming_message})
    return messages


def _trim_history(history: Sequence[Message]) -> List[Dict[str, str]]:
    """Keep the newest messages that fit both limits, oldest first."""
    recent = list(history)[-_MAX_HISTORY_MESSAGES:]

    kept: List[Dict[str, str]] = []
    used = 0
    for message in reversed(recent):
        used += len(message.content)
        if used > _MAX_HISTORY_CHARS:
            break
        kept.append({"role": message.role, "content": message.content})

    kept.reverse()
    return kept
