"""Prompt contract and context assembly."""

from .constants import SYSTEM_PROMPT
from .context import ContextAssembler

__all__ = ["ContextAssembler", "SYSTEM_PROMPT"]
