"""Relay factory functions for CLI.

Centralizes creation of the relay configuration and chat relay from
environment variables. Hides configuration details from command
implementations.
"""

import os

from rich.console import Console

from ..llm import ChatRelay, RelayConfig, create_chat_relay
from ..llm.models import DEFAULT_BASE_URL, DEFAULT_MODEL

# Default console for output
_console = Console()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment variables.

    Returns:
        Relay configuration (without credential if none is set)

    Environment variables:
        OPENAI_API_KEY: OpenAI API key (optional, demo mode without it)
        OPENAI_MODEL: Chat model (default: gpt-4o)
        OPENAI_BASE_URL: API base URL (default: https://api.openai.com/v1)
    """
    return RelayConfig(
        api_key=os.getenv("OPENAI_API_KEY") or None,
        model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
        base_url=os.getenv("OPENAI_BASE_URL") or DEFAULT_BASE_URL,
    )


def get_relay(console: Console | None = None) -> ChatRelay:
    """Create chat relay from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        ChatRelay instance, in demo mode if OPENAI_API_KEY is not set
    """
    con = console or _console
    config = get_relay_config()
    if not config.has_credential:
        con.print("[yellow]Warning: OPENAI_API_KEY not set, running in demo mode[/yellow]")
    return create_chat_relay(config)
