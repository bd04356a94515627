"""Event channel between the relay, the overlay controller and the UI state.

Each event is a frozen dataclass with a fixed ``name`` and a typed payload.
A stream produces any number of ``StreamChunk`` events followed by exactly
one terminal event: ``StreamEnd`` or ``StreamError``, never both.
"""

from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from ..llm.errors import RelayError
from .config import STREAM_ERROR_MESSAGE

if TYPE_CHECKING:
    from ..llm.models import OutboundRequest
    from ..llm.relay import ChatRelay


@dataclass(frozen=True)
class StreamChunk:
    """One text fragment of the answer."""

    name: ClassVar[str] = "chat-message-stream-chunk"

    stream_id: int
    text: str


@dataclass(frozen=True)
class StreamEnd:
    """The stream completed normally."""

    name: ClassVar[str] = "chat-message-stream-end"

    stream_id: int


@dataclass(frozen=True)
class StreamError:
    """The stream terminated abnormally."""

    name: ClassVar[str] = "chat-message-stream-error"

    stream_id: int
    message: str


@dataclass(frozen=True)
class OverlayShown:
    """The overlay became visible."""

    name: ClassVar[str] = "overlay-shown"


@dataclass(frozen=True)
class OverlayHidden:
    """The overlay was dismissed."""

    name: ClassVar[str] = "overlay-hidden"


@dataclass(frozen=True)
class ScreenCaptured:
    """A screenshot is ready to attach to the next question (None on failure)."""

    name: ClassVar[str] = "initiate-chat-with-screen"

    data: str | None


StreamEvent = StreamChunk | StreamEnd | StreamError
OverlayEvent = OverlayShown | OverlayHidden | ScreenCaptured


async def relay_stream_events(
    relay: "ChatRelay",
    request: "OutboundRequest",
    stream_id: int,
) -> AsyncIterator[StreamEvent]:
    """Run a streamed request and translate it into stream events.

    Args:
        relay: Chat relay to send the request through
        request: The user's prompt and optional screenshot
        stream_id: Identifier tagging every event of this stream

    Yields:
        StreamChunk events, then one StreamEnd or StreamError
    """
    async with aclosing(relay.iter_stream(request.prompt, request.image)) as chunks:
        try:
            async for chunk in chunks:
                yield StreamChunk(stream_id=stream_id, text=chunk)
        except RelayError as e:
            yield StreamError(stream_id=stream_id, message=e.message)
            return
        except Exception:
            yield StreamError(stream_id=stream_id, message=STREAM_ERROR_MESSAGE)
            return

    yield StreamEnd(stream_id=stream_id)
