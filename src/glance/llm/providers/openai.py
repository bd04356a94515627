from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    ChatMessage,
    LLMResponse,
    StreamingResponse,
)
from ..sse import aiter_deltas


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider.

    Hidden design decisions:
    - OpenAI API client initialization (timeout, no automatic retries)
    - Message format conversion (text and inlined image parts)
    - Stream framing: the raw ``data:`` lines are read through
      ``with_streaming_response`` and parsed by :mod:`glance.llm.sse`
    - Authentication mechanism (bearer token handled by the SDK)
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str | None = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 0,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use (must accept image input for screenshots)
            base_url: API base URL (any OpenAI-compatible endpoint)
            timeout: Request timeout in seconds
            max_retries: Automatic SDK retries (0: one call per user action)
            **client_kwargs: Additional kwargs for AsyncOpenAI client (e.g. http_client)
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def _request_params(
        self,
        messages: list[ChatMessage],
        model: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [msg.to_payload() for msg in messages],
            "temperature": temperature,
            **kwargs
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens
        return request_params

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion using OpenAI.

        Args:
            messages: Request messages
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            LLMResponse with the first choice's content (empty if none)
        """
        request_params = self._request_params(
            messages, model, temperature, max_tokens, **kwargs
        )
        completion = await self._client.chat.completions.create(**request_params)

        content = ""
        if completion.choices and completion.choices[0].message is not None:
            content = completion.choices[0].message.content or ""

        usage = None
        if getattr(completion, "usage", None):
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return LLMResponse(
            content=content,
            model=getattr(completion, "model", None) or request_params["model"],
            usage=usage
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion using OpenAI.

        Args:
            messages: Request messages
            model: Model to use (overrides default)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            StreamingResponse that yields text chunks
        """
        request_params = self._request_params(
            messages, model, temperature, max_tokens, stream=True, **kwargs
        )
        return StreamingResponse(self._chat_stream_generator(request_params))

    async def _chat_stream_generator(
        self,
        request_params: dict[str, Any],
    ) -> AsyncIterator[str]:
        """Open the streamed response and yield its text deltas."""
        async with self._client.chat.completions.with_streaming_response.create(
            **request_params
        ) as response:
            async for delta in aiter_deltas(response.iter_lines()):
                yield delta

    async def close(self) -> None:
        """Close the OpenAI client.

        Note: Uses the OpenAI SDK's async context manager for proper cleanup.
        See: https://github.com/openai/openai-python#async-usage
        """
        await self._client.close()
