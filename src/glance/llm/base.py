from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse, StreamingResponse


class LLMProvider(ABC):
    """Chat-completions backend used by the relay.

    Hides the API client, authentication and stream framing of one
    provider. Providers raise their native errors; the relay classifies
    them.
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Default model name."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send the messages and return the complete answer."""

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Send the messages with streaming enabled.

        The request is sent lazily: errors surface while iterating.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the HTTP connection pool."""
