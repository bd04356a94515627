"""Parsing of streamed chat-completion frames.

Hides the wire framing of the streaming endpoint:
- Line-delimited ``data: <json>`` frames
- The ``[DONE]`` end-of-stream sentinel
- Extraction of the text delta from each JSON frame

Malformed frames are skipped, never fatal.
"""

import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def extract_delta(payload: str) -> str | None:
    """Return the non-empty text delta of one JSON frame, or None.

    Expected shape: ``{"choices": [{"delta": {"content": "..."}}]}``.
    """
    try:
        frame: Any = json.loads(payload)
        content = frame["choices"][0]["delta"].get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        return None

    if isinstance(content, str) and content:
        return content
    return None


class StreamFrameParser:
    """Line parser turning raw stream lines into text deltas.

    Once the sentinel is seen the parser is ``done`` and ignores all input.
    """

    def __init__(self) -> None:
        self.done = False

    def feed_line(self, line: str) -> str | None:
        """Process one complete line. Returns its text delta, if any."""
        if self.done:
            return None

        line = line.rstrip("\r")
        if not line.startswith(DATA_PREFIX):
            return None

        payload = line[len(DATA_PREFIX):]
        if payload.strip() == DONE_SENTINEL:
            self.done = True
            return None

        return extract_delta(payload)


async def aiter_deltas(lines: AsyncIterable[str]) -> AsyncIterator[str]:
    """Yield text deltas from an async iterable of lines, stopping at the sentinel."""
    parser = StreamFrameParser()
    async for line in lines:
        delta = parser.feed_line(line)
        if delta is not None:
            yield delta
        if parser.done:
            return
