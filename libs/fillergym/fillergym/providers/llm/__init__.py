"""LLM Provider implementations."""

from __future__ import annotations

from fillergym.providers.llm.base import LLMProvider, LLMUsage, Message

__all__ = ["LLMProvider", "LLMUsage", "Message"]
