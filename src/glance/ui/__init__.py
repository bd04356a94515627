"""Terminal UI module for glance.

Provides a Textual-based overlay: a floating input bar with a streaming
chat panel.

Module structure (each module hides a design decision):
- config.py: User-visible strings and UI constants
- models.py: Data structures (message and stream buffer representation)
- events.py: Event channel (stream and overlay events)
- state.py: Chat state machine (how streams become messages)
- overlay.py: Overlay visibility (who owns the visible flag)
- capture.py: Screen capture backend and image encoding
- widgets.py: Custom widgets (input bar, chat panel, log rendering)
- styles.py: CSS styling (layout decisions)
- app.py: Application orchestration (user interaction flow)
"""

from .app import OverlayApp, run_overlay
from .config import LogLevel
from .events import (
    OverlayHidden,
    OverlayShown,
    ScreenCaptured,
    StreamChunk,
    StreamEnd,
    StreamError,
    relay_stream_events,
)
from .models import ChatMessage, StreamBuffer
from .overlay import OverlayController, OverlayState
from .state import ChatState, StreamPhase
from .widgets import ChatPanel, DebugPanel, OverlayInputBar

__all__ = [
    "ChatMessage",
    "ChatPanel",
    "ChatState",
    "DebugPanel",
    "LogLevel",
    "OverlayApp",
    "OverlayController",
    "OverlayHidden",
    "OverlayInputBar",
    "OverlayShown",
    "OverlayState",
    "ScreenCaptured",
    "StreamBuffer",
    "StreamChunk",
    "StreamEnd",
    "StreamError",
    "StreamPhase",
    "relay_stream_events",
    "run_overlay",
]
