"""
Prompt Builder layer for the concierge.

Exports the SYSTEM_PROMPT behavioral contract and build_messages() assembler.
"""

from .prompt_builder import SYSTEM_PROMPT, build_messages

__all__ = ["SYSTEM_PROMPT", "build_messages"]
