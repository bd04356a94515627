"""Data models for the overlay UI.

Hides the internal representation of chat messages and the stream buffer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import uuid4

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """A finalized message in the visible conversation."""

    role: Role
    content: str
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class StreamBuffer:
    """Accumulator for the answer currently being streamed.

    Append-only while active; finalized exactly once.
    """

    stream_id: int
    partial_text: str = ""
    active: bool = True

    def append(self, text: str) -> bool:
        """Append a chunk. Returns False (and drops it) once finalized."""
        if not self.active:
            return False
        self.partial_text += text
        return True

    def finalize(self) -> str:
        """Deactivate the buffer and return its trimmed content."""
        self.active = False
        text, self.partial_text = self.partial_text, ""
        return text.strip()
