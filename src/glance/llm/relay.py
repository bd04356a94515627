"""Chat relay between the overlay and the language model API.

Hides from the UI:
- Message construction (system instructions, inlined screenshot)
- Whether a real backend is configured (demo answers otherwise)
- Every provider failure: classified into its fallback text
"""

from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

from ..prompts import get_demo_instructions, get_system_prompt
from .base import LLMProvider
from .errors import NO_RESPONSE_MESSAGE, RelayError, classify_error, fallback_message
from .models import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    OutboundRequest,
)


def demo_response(prompt: str, has_screen_data: bool) -> str:
    """Canned answer used when no credential is configured."""
    if has_screen_data:
        screen_line = (
            "I can see your screen content and would analyze it to provide relevant "
            "insights if I had access to a real LLM API."
        )
    else:
        screen_line = "I'd be happy to help with that question if I had access to a real LLM API."

    return "\n\n".join([
        f'I understand you\'re asking: "{prompt}"',
        screen_line,
        get_demo_instructions(),
    ])


class ChatRelay:
    """Sends one prompt (plus optional screenshot) per call to the provider.

    Without a provider the relay runs in demo mode and never touches the
    network. With one, any failure is converted into a fallback message
    for its category. ``send_message`` and ``send_message_stream`` never
    raise; ``iter_stream`` raises the message as a ``RelayError`` so that
    stream consumers can tell a failure from an answer.

    Example:
        relay = ChatRelay(provider)
        answer = await relay.send_message("What is on my screen?", image=data_url)

        async for chunk in relay.send_message_stream("Summarize this"):
            print(chunk, end="")
    """

    def __init__(
        self,
        provider: LLMProvider | None,
        model: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        system_prompt: str | None = None,
    ) -> None:
        self._provider = provider
        self._model = model or (provider.model if provider is not None else DEFAULT_MODEL)
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._system_prompt = system_prompt
        self._debug_callback: Any | None = None

    @property
    def model(self) -> str:
        """Model identifier used for requests and error messages."""
        return self._model

    def is_configured(self) -> bool:
        """Whether a real backend (credential) is available."""
        return self._provider is not None

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for request tracing.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "RELAY", message)

    def _build_request(self, prompt: str, image: str | None) -> OutboundRequest:
        return OutboundRequest(prompt=prompt, image=image)

    def _system(self) -> str:
        if self._system_prompt is None:
            self._system_prompt = get_system_prompt()
        return self._system_prompt

    def _failure(self, error: BaseException) -> RelayError:
        kind = classify_error(error)
        self._debug("error", f"Request failed ({kind.value}): {type(error).__name__}: {error}")
        return RelayError(kind, fallback_message(kind, self._model))

    async def send_message(self, prompt: str, image: str | None = None) -> str:
        """Send a prompt and return the complete answer.

        Args:
            prompt: User's question
            image: Optional screenshot as a data URL (or bare base64)

        Returns:
            The answer text, the demo message, or a fallback message on failure
        """
        request = self._build_request(prompt, image)

        if self._provider is None:
            self._debug("warning", "No API key configured, returning demo response")
            return demo_response(request.prompt, request.has_image)

        self._debug("info", f"Sending request to {self._model} (image: {request.has_image})")
        try:
            response = await self._provider.chat_completion(
                request.to_messages(self._system()),
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            return self._failure(e).message

        self._debug("info", f"Response received ({len(response.content)} chars)")
        return response.content or NO_RESPONSE_MESSAGE

    async def iter_stream(
        self,
        prompt: str,
        image: str | None = None,
    ) -> AsyncIterator[str]:
        """Stream the answer, raising a classified error on failure.

        The connection is released when the sequence ends, fails or is
        closed early by the consumer.

        Args:
            prompt: User's question
            image: Optional screenshot as a data URL (or bare base64)

        Yields:
            Text chunks

        Raises:
            RelayError: Carrying the fallback message for the failure category
        """
        request = self._build_request(prompt, image)

        if self._provider is None:
            self._debug("warning", "No API key configured, returning demo response")
            yield demo_response(request.prompt, request.has_image)
            return

        self._debug("info", f"Streaming request to {self._model} (image: {request.has_image})")
        stream = None
        try:
            stream = await self._provider.chat_completion_stream(
                request.to_messages(self._system()),
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
            async for chunk in stream:
                yield chunk
        except Exception as e:
            raise self._failure(e) from e
        finally:
            if stream is not None:
                await stream.aclose()

        self._debug("info", f"Stream complete ({stream.chunk_count} chunks)")

    async def send_message_stream(
        self,
        prompt: str,
        image: str | None = None,
    ) -> AsyncIterator[str]:
        """Send a prompt and yield the answer as it arrives.

        A lazy, finite, non-restartable sequence. On failure exactly one
        fallback message is yielded and the sequence ends.

        Args:
            prompt: User's question
            image: Optional screenshot as a data URL (or bare base64)

        Yields:
            Text chunks
        """
        async with aclosing(self.iter_stream(prompt, image)) as chunks:
            try:
                async for chunk in chunks:
                    yield chunk
            except RelayError as e:
                yield e.message

    async def close(self) -> None:
        """Close the underlying provider."""
        if self._provider is not None:
            await self._provider.close()

    async def __aenter__(self) -> "ChatRelay":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
