from .base import LLMProvider
from .errors import ErrorKind, RelayError, classify_error, fallback_message
from .factory import create_chat_relay, create_llm_provider
from .models import ChatMessage, LLMResponse, OutboundRequest, RelayConfig, StreamingResponse
from .providers import OpenAIProvider
from .relay import ChatRelay

__all__ = [
    "ChatMessage",
    "ChatRelay",
    "ErrorKind",
    "LLMProvider",
    "LLMResponse",
    "OpenAIProvider",
    "OutboundRequest",
    "RelayConfig",
    "RelayError",
    "StreamingResponse",
    "classify_error",
    "create_chat_relay",
    "create_llm_provider",
    "fallback_message",
]
