"""LLM Provider base class."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class Message:
    """A chat message."""

    role: str  # "system" | "user" | "assistant"
    content: str


@dataclass
class LLMUsage:
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class LLMProvider(ABC):
    """Abstract base class for chat-completion providers."""

    provider: str = "llm"
    model: str = ""
    api_key: str = ""

    @property
    def has_credentials(self) -> bool:
        return bool(str(self.api_key or "").strip())

    @abstractmethod
    async def complete_json(
        self,
        messages: list[Message],
        temperature: float = 0.3,
    ) -> dict[str, Any]:
        """Generate a structured JSON response.

        Args:
            messages: List of chat messages.
            temperature: Sampling temperature.

        Returns:
            Parsed JSON object.
        """
        ...

    async def close(self) -> None:
        """Close any underlying resources (optional)."""
        return None
