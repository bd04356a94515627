"""Chat state container for the overlay.

Hides how the visible conversation is held and how streamed answers become
messages. The state machine is ``IDLE -> STREAMING -> IDLE``; every return
to ``IDLE`` appends zero or one finalized message.

The container is owned by the UI task; it performs no I/O.
"""

from enum import Enum

from ..llm.models import OutboundRequest
from .config import DEFAULT_PLACEHOLDER, SCREEN_PLACEHOLDER, STREAM_ERROR_MESSAGE
from .events import StreamChunk, StreamEnd, StreamError, StreamEvent
from .models import ChatMessage, Role, StreamBuffer


class StreamPhase(str, Enum):
    """Streaming phase of the chat state."""

    IDLE = "idle"
    STREAMING = "streaming"


class ChatState:
    """Messages, input and streaming state of one overlay session."""

    def __init__(self) -> None:
        self.messages: list[ChatMessage] = []

        self.input_value = ""
        self.placeholder = DEFAULT_PLACEHOLDER

        self.is_loading = False
        self.is_processing = False

        self.current_screen_data: str | None = None
        self.is_screen_captured = False

        self._buffer: StreamBuffer | None = None
        self._next_stream_id = 1

    # Messages

    def add_message(self, content: str, role: Role) -> ChatMessage:
        """Append a finalized message."""
        message = ChatMessage(role=role, content=content)
        self.messages.append(message)
        return message

    def clear_messages(self) -> None:
        self.messages.clear()

    def get_last_response(self) -> str | None:
        """Content of the most recent assistant message."""
        for message in reversed(self.messages):
            if message.role == "assistant":
                return message.content
        return None

    # Streaming

    @property
    def phase(self) -> StreamPhase:
        if self._buffer is not None and self._buffer.active:
            return StreamPhase.STREAMING
        return StreamPhase.IDLE

    @property
    def is_streaming(self) -> bool:
        return self.phase is StreamPhase.STREAMING

    @property
    def stream_id(self) -> int | None:
        """Identifier of the active stream, if any."""
        return self._buffer.stream_id if self.is_streaming else None

    @property
    def stream_content(self) -> str:
        """Text received so far for the active stream."""
        return self._buffer.partial_text if self.is_streaming else ""

    def start_streaming(self) -> int | None:
        """Enter STREAMING with an empty buffer.

        Returns:
            The new stream id, or None if a stream is already active
        """
        if self.is_streaming:
            return None
        self._buffer = StreamBuffer(stream_id=self._next_stream_id)
        self._next_stream_id += 1
        return self._buffer.stream_id

    def append_chunk(self, text: str) -> bool:
        """Append to the active stream. A chunk arriving while IDLE is dropped."""
        if not self.is_streaming:
            return False
        return self._buffer.append(text)

    def finish_streaming(self) -> ChatMessage | None:
        """Commit the buffer (if non-blank) and return to IDLE."""
        content = self._end_stream()
        if content:
            return self.add_message(content, "assistant")
        return None

    def report_error(self, message: str = STREAM_ERROR_MESSAGE) -> ChatMessage:
        """Discard any partial answer, commit one fallback message, force IDLE."""
        self._end_stream()
        return self.add_message(message, "assistant")

    def cancel_streaming(self, stream_id: int | None = None) -> bool:
        """Discard the active stream without committing anything.

        Args:
            stream_id: Only cancel if this is the active stream (None: any)

        Returns:
            True if a stream was cancelled
        """
        if not self.is_streaming:
            return False
        if stream_id is not None and stream_id != self._buffer.stream_id:
            return False
        self._end_stream()
        return True

    def _end_stream(self) -> str:
        content = self._buffer.finalize() if self._buffer is not None else ""
        self._buffer = None
        self.is_loading = False
        self.is_processing = False
        return content

    def apply(self, event: StreamEvent) -> bool:
        """Apply a stream event if it belongs to the active stream.

        Events for stale, finished or unknown streams are dropped, so each
        stream delivers at most one terminal transition.

        Returns:
            True if the event changed the state
        """
        if event.stream_id != self.stream_id:
            return False

        if isinstance(event, StreamChunk):
            return self.append_chunk(event.text)
        if isinstance(event, StreamEnd):
            self.finish_streaming()
            return True
        if isinstance(event, StreamError):
            self.report_error(event.message)
            return True
        return False

    # Input and submission

    def set_input_value(self, value: str) -> None:
        self.input_value = value

    def submit(self, text: str | None = None) -> OutboundRequest | None:
        """Turn the current input into a request and start streaming.

        Rejected (returns None) while a request is in flight or when the
        input is blank. The attached screenshot is consumed by the request.

        Args:
            text: Text to submit (defaults to the current input value)

        Returns:
            The request to send, or None if rejected
        """
        message = (self.input_value if text is None else text).strip()
        if self.is_processing or not message:
            return None

        if self.start_streaming() is None:
            return None

        self.is_processing = True
        self.is_loading = True

        self.add_message(message, "user")
        self.input_value = ""
        self.placeholder = DEFAULT_PLACEHOLDER

        request = OutboundRequest(prompt=message, image=self.current_screen_data)
        self.set_screen_data(None)
        return request

    # Screen capture

    def set_screen_captured(self, captured: bool) -> None:
        self.is_screen_captured = captured

    def set_screen_data(self, data: str | None) -> None:
        """Attach (or detach) a screenshot for the next question."""
        self.current_screen_data = data
        self.is_screen_captured = data is not None
        if data is not None:
            self.placeholder = SCREEN_PLACEHOLDER

    # Session

    @property
    def should_show_chat(self) -> bool:
        return bool(self.messages) or self.is_streaming

    def clear_state(self) -> None:
        """Reset input, screenshot, flags and any live stream.

        Messages are kept; see :meth:`reset`.
        """
        self._end_stream()
        self.input_value = ""
        self.current_screen_data = None
        self.is_screen_captured = False
        self.placeholder = DEFAULT_PLACEHOLDER

    def reset(self) -> None:
        """Clear everything, including the conversation."""
        self.clear_state()
        self.clear_messages()
