"""Pytest configuration and shared fixtures."""
import json
import os
from collections.abc import Callable

import httpx
import pytest

from glance.llm import ChatRelay, OpenAIProvider

TEST_MODEL = "gpt-4o"
TEST_API_KEY = "sk-test"


def completion_body(content: str | None, model: str = TEST_MODEL) -> dict:
    """Return a non-streaming chat completion payload."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 2, "total_tokens": 12},
    }


def sse_frame(content: str | None) -> str:
    """Return one ``data:`` line carrying a text delta."""
    delta = {} if content is None else {"content": content}
    frame = {
        "id": "chatcmpl-test",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": TEST_MODEL,
        "choices": [{"index": 0, "delta": delta, "finish_reason": None}],
    }
    return f"data: {json.dumps(frame)}"


def sse_body(*chunks: str, done: bool = True) -> str:
    """Return a streaming body with one frame per chunk and the sentinel."""
    lines = [sse_frame(chunk) for chunk in chunks]
    if done:
        lines.append("data: [DONE]")
    return "\n\n".join(lines) + "\n\n"


def error_body(message: str = "error") -> dict:
    return {"error": {"message": message, "type": "invalid_request_error", "code": None}}


Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """Mock transport handler that records requests and replays one response."""

    def __init__(self, respond: Handler):
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def make_provider(handler: Handler, model: str = TEST_MODEL) -> OpenAIProvider:
    """Create an OpenAI provider whose HTTP traffic goes to ``handler``."""
    return OpenAIProvider(
        api_key=TEST_API_KEY,
        model=model,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def make_relay(handler: Handler, model: str = TEST_MODEL) -> ChatRelay:
    """Create a configured chat relay backed by a mock transport."""
    return ChatRelay(make_provider(handler, model), model=model, system_prompt="You help.")


@pytest.fixture
def demo_relay():
    """Return a relay without credential (demo mode)."""
    return ChatRelay(None, model=TEST_MODEL, system_prompt="You help.")


@pytest.fixture
def sample_image(tmp_path):
    """Create a small PNG file."""
    from PIL import Image

    path = tmp_path / "screen.png"
    Image.new("RGB", (64, 32), color=(200, 30, 30)).save(path, format="PNG")
    return path


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {"openai": os.getenv("OPENAI_API_KEY")}


def stream_response(body) -> httpx.Response:
    """Return an event-stream response from a text body or an async byte iterator."""
    content = body.encode() if isinstance(body, str) else body
    return httpx.Response(200, content=content, headers={"content-type": "text/event-stream"})


async def dropped_body(*chunks: str):
    """Yield frames for ``chunks``, then fail as if the connection was reset."""
    for chunk in chunks:
        yield (sse_frame(chunk) + "\n\n").encode()
    raise httpx.ReadError("Connection reset by peer")
