"""
Glance: a floating terminal overlay that answers questions about your screen.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .llm import ChatRelay, OutboundRequest, RelayConfig, create_chat_relay

__all__ = [
    "ChatRelay",
    "OutboundRequest",
    "RelayConfig",
    "create_chat_relay",
]
