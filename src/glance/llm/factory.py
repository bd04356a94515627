from typing import Any

from .base import LLMProvider
from .models import RelayConfig
from .providers import OpenAIProvider
from .relay import ChatRelay


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('openai', or 'openai-compatible' for any
            endpoint speaking the same protocol)
        **config: Provider-specific configuration
            - api_key: str (required)
            - model: str (default: 'gpt-4o')
            - base_url: str (default: 'https://api.openai.com/v1')
            - timeout: float (default: 30.0)
            - max_retries: int (default: 0)

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "openai",
        ...     api_key="sk-...",
        ...     model="gpt-4o"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("openai", "openai-compatible"):
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openai', 'openai-compatible'"
    )


def create_chat_relay(config: RelayConfig, **client_kwargs: Any) -> ChatRelay:
    """Create a chat relay from configuration.

    Without a credential the relay is created in demo mode (no provider).

    Args:
        config: Relay configuration
        **client_kwargs: Extra kwargs for the HTTP client (e.g. http_client)

    Returns:
        ChatRelay instance
    """
    provider = None
    if config.has_credential:
        provider = create_llm_provider(
            "openai",
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout,
            **client_kwargs
        )

    return ChatRelay(
        provider,
        model=config.model,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )
