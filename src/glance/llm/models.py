from collections.abc import AsyncIterator
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MODEL = "gpt-4o"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MAX_TOKENS = 500
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TIMEOUT = 30.0

DATA_URL_PREFIX = "data:"
DEFAULT_IMAGE_MIME = "image/png"


class StreamingResponse:
    """Wrapper for streaming LLM responses.

    Acts as a finite, non-restartable async iterator of text chunks.
    Once the underlying iterator is exhausted (or closed) every further
    ``__anext__`` raises ``StopAsyncIteration``.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for chunk in stream:
            print(chunk, end="")
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text chunks.

        Args:
            async_iter: Async iterator yielding text chunks
        """
        self._iter = async_iter
        self._finished = False
        self._chunk_count = 0

    @property
    def chunk_count(self) -> int:
        """Number of chunks produced so far."""
        return self._chunk_count

    def __aiter__(self) -> "StreamingResponse":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get next chunk from the underlying iterator."""
        if self._finished:
            raise StopAsyncIteration
        try:
            chunk = await self._iter.__anext__()
        except StopAsyncIteration:
            self._finished = True
            raise
        self._chunk_count += 1
        return chunk

    async def aclose(self) -> None:
        """Close the underlying iterator and release the connection."""
        self._finished = True
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()


class ImageURL(BaseModel):
    """Image reference inlined into a user message."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Data URL (or remote URL) of the image")


class ContentPart(BaseModel):
    """One part of a multi-part message (text or image)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text", "image_url"]
    text: str | None = None
    image_url: ImageURL | None = None

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def from_image(cls, url: str) -> "ContentPart":
        return cls(type="image_url", image_url=ImageURL(url=url))


class ChatMessage(BaseModel):
    """Represents a message sent to the chat-completions endpoint."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"] = Field(
        description="Role of the message sender: 'user', 'assistant', or 'system'"
    )
    content: str | list[ContentPart] = Field(
        description="Plain text, or a list of text/image parts"
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the wire format of the messages array."""
        return self.model_dump(exclude_none=True)


class OutboundRequest(BaseModel):
    """A single user action: prompt plus optional screenshot.

    Built per submission and consumed once by the relay.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(description="User's question")
    image: str | None = Field(
        default=None,
        description="Screenshot as a data URL (bare base64 is normalized)"
    )

    @field_validator("image")
    @classmethod
    def _normalize_image(cls, value: str | None) -> str | None:
        if not value:
            return None
        if value.startswith(DATA_URL_PREFIX) or value.startswith(("http://", "https://")):
            return value
        return f"data:{DEFAULT_IMAGE_MIME};base64,{value}"

    @property
    def has_image(self) -> bool:
        return self.image is not None

    def to_messages(self, system_prompt: str) -> list[ChatMessage]:
        """Build the provider message list: system instructions + user turn."""
        messages = [ChatMessage(role="system", content=system_prompt)]

        if self.image is not None:
            messages.append(ChatMessage(
                role="user",
                content=[
                    ContentPart.from_text(self.prompt),
                    ContentPart.from_image(self.image),
                ],
            ))
        else:
            messages.append(ChatMessage(role="user", content=self.prompt))

        return messages


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


class RelayConfig(BaseModel):
    """Connection settings for the chat relay."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = Field(default=None, description="Bearer credential")
    model: str = Field(default=DEFAULT_MODEL, description="Vision-capable chat model")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0.0, description="Seconds")

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)
