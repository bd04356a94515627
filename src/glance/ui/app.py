"""Main Textual overlay application.

Orchestrates the UI components and the request flow: input bar -> chat
state -> relay worker -> stream events -> chat state -> widgets.
"""

import asyncio
import contextlib
from collections.abc import Callable

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static

from ..llm.models import OutboundRequest
from ..llm.relay import ChatRelay
from .capture import capture_screen
from .config import CAPTURE_ERROR_MESSAGE, CAPTURE_FAILED_MESSAGE, LogLevel
from .events import OverlayEvent, OverlayHidden, OverlayShown, ScreenCaptured, relay_stream_events
from .overlay import OverlayController
from .state import ChatState
from .styles import APP_CSS
from .widgets import (
    CaptureIndicator,
    ChatPanel,
    DebugPanel,
    OverlayInputBar,
    ProcessingIndicator,
)


class OverlayApp(App):
    """Floating input bar with a streaming chat panel."""

    CSS = APP_CSS
    TITLE = "Glance"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("ctrl+backslash", "toggle_overlay", "Toggle", priority=True),
        Binding("ctrl+s", "capture_screen", "Capture", priority=True),
        Binding("escape", "hide_overlay", "Hide", priority=True),
        Binding("ctrl+k", "clear_chat", "Clear Chat", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Debug", priority=True),
    ]

    def __init__(
        self,
        relay: ChatRelay,
        log_level: str | None = None,
        hide_on_blur: bool = False,
        overlay: OverlayController | None = None,
        capture: Callable[[], str | None] = capture_screen,
    ) -> None:
        super().__init__()
        self._relay = relay
        self._panel_log_level = log_level
        self._hide_on_blur = hide_on_blur
        self._capture_fn = capture
        self._chat_state = ChatState()
        self._overlay_controller = overlay or OverlayController()
        self._overlay_controller.set_listener(self.handle_overlay_event)

    @property
    def chat_state(self) -> ChatState:
        return self._chat_state

    @property
    def overlay_controller(self) -> OverlayController:
        return self._overlay_controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Vertical(id="overlay", classes="-hidden"):
            yield CaptureIndicator(id="capture-indicator")
            yield OverlayInputBar(id="input-bar")
            yield ProcessingIndicator(id="processing")
            yield ChatPanel(id="chat-panel")

        yield Static("Overlay hidden. Press Ctrl+\\ to open it.", id="hidden-hint")
        yield DebugPanel(id="debug-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        if self._panel_log_level is not None:
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log_level = LogLevel.from_string(self._panel_log_level)
            log_panel.show()
            log_panel.info("UI", f"Log panel enabled with level: {self._panel_log_level.upper()}")

        self._relay.set_debug_callback(self._route_debug)

        mode = "live" if self._relay.is_configured() else "demo"
        self.sub_title = f"{self._relay.model} | {mode}"
        if not self._relay.is_configured():
            self.notify("OPENAI_API_KEY not set: answers are demo responses", severity="warning")

        if not self._overlay_controller.show():
            self._apply_visibility()
        self.refresh_view()

    def on_unmount(self) -> None:
        """Detach the relay's trace output from the log panel."""
        self._relay.set_debug_callback(None)

    def _route_debug(self, level: str, component: str, message: str) -> None:
        """Route relay trace lines to the log panel."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        log_panel.add_entry(component, message, LogLevel.from_string(level))

    def _trace(self, level: str, message: str) -> None:
        self._route_debug(level, "UI", message)

    def refresh_view(self) -> None:
        """Re-render every widget from the chat state."""
        self.query_one("#capture-indicator", CaptureIndicator).sync(self._chat_state)
        self.query_one("#input-bar", OverlayInputBar).sync(self._chat_state)
        self.query_one("#processing", ProcessingIndicator).sync(self._chat_state)
        self.query_one("#chat-panel", ChatPanel).sync(self._chat_state)

    def _apply_visibility(self) -> None:
        visible = self._overlay_controller.visible
        self.query_one("#overlay", Vertical).set_class(not visible, "-hidden")
        self.query_one("#hidden-hint", Static).set_class(not visible, "visible")

    # Overlay events

    def handle_overlay_event(self, event: OverlayEvent) -> None:
        """React to overlay transitions and captured screenshots."""
        if isinstance(event, OverlayShown):
            self._route_debug("debug", "OVERLAY", "Overlay shown")
            self._apply_visibility()
            self.query_one("#input-bar", OverlayInputBar).focus_input()

        elif isinstance(event, OverlayHidden):
            self._route_debug("debug", "OVERLAY", "Overlay hidden, clearing session")
            self.workers.cancel_group(self, "relay")
            self.workers.cancel_group(self, "capture")
            self._chat_state.reset()
            self._apply_visibility()

        elif isinstance(event, ScreenCaptured):
            if event.data is not None:
                self._route_debug("info", "CAPTURE", f"Screenshot attached ({len(event.data)} bytes)")
                self._chat_state.set_screen_data(event.data)
                self.query_one("#input-bar", OverlayInputBar).focus_input()
            else:
                self._route_debug("warning", "CAPTURE", "Screen capture returned nothing")
                self._chat_state.set_screen_data(None)
                self._chat_state.add_message(CAPTURE_FAILED_MESSAGE, "assistant")

        self.refresh_view()

    def on_app_blur(self, event: events.AppBlur) -> None:
        """Dismiss the overlay when the terminal loses focus (if enabled)."""
        if self._hide_on_blur:
            self._overlay_controller.hide()

    # Chat flow

    def on_overlay_input_bar_changed(self, event: OverlayInputBar.Changed) -> None:
        self._chat_state.set_input_value(event.value)

    def on_overlay_input_bar_submitted(self, event: OverlayInputBar.Submitted) -> None:
        """Handle user input submission."""
        request = self._chat_state.submit(event.value)
        if request is None:
            return

        stream_id = self._chat_state.stream_id
        self._trace("info", f"Submitting stream {stream_id}: '{request.prompt[:50]}'")
        self.refresh_view()
        self._stream_response(request, stream_id)

    @work(exclusive=True, group="relay")
    async def _stream_response(self, request: OutboundRequest, stream_id: int) -> None:
        """Relay the request and apply its events as a background async worker."""
        try:
            async for event in relay_stream_events(self._relay, request, stream_id):
                self._chat_state.apply(event)
                self.refresh_view()
            if self._overlay_controller.visible:
                self.query_one("#input-bar", OverlayInputBar).focus_input()
        finally:
            # Cancelled or abandoned streams must not stay live
            if self._chat_state.cancel_streaming(stream_id):
                self._trace("warning", f"Stream {stream_id} abandoned")

    # Actions

    def action_toggle_overlay(self) -> None:
        """Show or hide the overlay."""
        self._overlay_controller.toggle()

    def action_hide_overlay(self) -> None:
        """Dismiss the overlay."""
        self._overlay_controller.hide()

    def action_capture_screen(self) -> None:
        """Capture the screen and attach it to the next question."""
        if self._chat_state.is_processing or not self._overlay_controller.visible:
            return
        self._grab_screen()

    @work(exclusive=True, group="capture")
    async def _grab_screen(self) -> None:
        self._chat_state.set_screen_captured(True)
        self.refresh_view()
        try:
            data = await asyncio.to_thread(self._capture_fn)
        except Exception as e:
            self._route_debug("error", "CAPTURE", f"Exception: {e}")
            self._chat_state.set_screen_data(None)
            self._chat_state.add_message(CAPTURE_ERROR_MESSAGE, "assistant")
            self.refresh_view()
            return

        self.handle_overlay_event(ScreenCaptured(data))

    def action_clear_chat(self) -> None:
        """Clear the conversation (ignored while a request is in flight)."""
        if self._chat_state.is_processing:
            self.notify("Wait for the current answer to finish", severity="warning", timeout=2)
            return
        self._chat_state.clear_messages()
        self.refresh_view()
        self.notify("Chat cleared", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        response = self._chat_state.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_overlay(
    relay: ChatRelay,
    log_level: str | None = None,
    hide_on_blur: bool = False,
) -> None:
    """Run the overlay app until the user quits.

    Args:
        relay: Chat relay used for every question
        log_level: Log level for panel (debug/info/warning/error), None to hide
        hide_on_blur: Dismiss the overlay when the terminal loses focus
    """
    app = OverlayApp(relay=relay, log_level=log_level, hide_on_blur=hide_on_blur)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(RuntimeError):
            await relay.close()


__all__ = ["OverlayApp", "run_overlay"]
