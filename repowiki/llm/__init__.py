"""Completion endpoint adapters."""

from .client import CompletionClient, CompletionRequest

__all__ = ["CompletionClient", "CompletionRequest"]
