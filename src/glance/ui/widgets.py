"""Custom Textual widgets for the overlay.

Hides widget implementation details:
- Input bar behavior (single line, disabled while processing)
- Chat message rendering (markdown for answers, live stream with cursor)
- Log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Input, Markdown, RichLog, Static

from .config import LOG_MAX_MESSAGE_LENGTH, LOG_TIMESTAMP_FORMAT, STREAMING_CURSOR, LogLevel
from .models import ChatMessage
from .state import ChatState


class OverlayInputBar(Horizontal):
    """The floating input bar: status dot, text input and shortcut hint."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class Changed(Message):
        """Message sent when the input text changes."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        yield Static("●", id="status-indicator")
        yield Input(id="overlay-input")
        yield Static("^S capture", id="shortcuts")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.post_message(self.Submitted(event.value))

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.post_message(self.Changed(event.value))

    def sync(self, state: ChatState) -> None:
        """Reflect input value, placeholder and processing flag."""
        text_input = self.query_one("#overlay-input", Input)
        if text_input.value != state.input_value:
            text_input.value = state.input_value
        text_input.placeholder = state.placeholder
        text_input.disabled = state.is_processing
        self.set_class(state.is_processing, "-processing")

    def focus_input(self) -> None:
        """Focus the text input."""
        text_input = self.query_one("#overlay-input", Input)
        text_input.focus()


class ChatPanel(VerticalScroll):
    """Scrollable conversation with a live streaming message at the bottom."""

    BORDER_TITLE = "Chat"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._rendered_ids: list[str] = []
        self._stream_widget: Static | None = None

    def sync(self, state: ChatState) -> None:
        """Render new messages and the live stream from the state."""
        self.display = state.should_show_chat

        state_ids = [message.id for message in state.messages]
        if state_ids[:len(self._rendered_ids)] != self._rendered_ids:
            # Conversation was cleared or replaced
            self.remove_children()
            self._rendered_ids = []
            self._stream_widget = None

        for message in state.messages[len(self._rendered_ids):]:
            self._mount_message(message)
            self._rendered_ids.append(message.id)

        self._sync_stream(state)
        self.border_subtitle = f"{len(state.messages)} messages" if state.messages else ""
        self.scroll_end(animate=False)

    def _mount_message(self, message: ChatMessage) -> None:
        widget = Markdown(message.content) if message.role == "assistant" else Static(
            Text(message.content)
        )
        widget.add_class("chat-message", message.role)
        self.mount(widget, before=self._stream_widget)

    def _sync_stream(self, state: ChatState) -> None:
        if state.is_streaming and state.stream_content:
            text = Text(state.stream_content)
            text.append(STREAMING_CURSOR, style="blink")
            if self._stream_widget is None:
                self._stream_widget = Static(text, classes="chat-message assistant streaming")
                self.mount(self._stream_widget)
            else:
                self._stream_widget.update(text)
        elif self._stream_widget is not None:
            self._stream_widget.remove()
            self._stream_widget = None


class CaptureIndicator(Static):
    """Thin bar lit while a screenshot is attached."""

    def sync(self, state: ChatState) -> None:
        self.set_class(state.is_screen_captured, "active")
        self.update("screen attached" if state.is_screen_captured else "")


class ProcessingIndicator(Static):
    """'Processing...' line shown while a request is loading."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__("⠿ Processing...", *args, **kwargs)

    def sync(self, state: ChatState) -> None:
        self.display = state.is_loading


class DebugPanel(RichLog):
    """Log panel for request tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (UI, RELAY, OVERLAY, CAPTURE)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "UI": "cyan",
            "RELAY": "magenta",
            "OVERLAY": "green",
            "CAPTURE": "blue",
        }

        line = Text.assemble(
            (f"{timestamp} ", "dim"),
            (f"{LogLevel.name(level):<5} ", level_colors.get(level, "white")),
            (f"[{component}] ", component_colors.get(component, "white")),
            message,
        )
        self.write(line)

    def info(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.INFO)

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        lines_text = []
        for line in self.lines:
            if hasattr(line, "text"):
                lines_text.append(line.text)
            elif hasattr(line, "__iter__"):
                lines_text.append("".join(seg.text for seg in line if hasattr(seg, "text")))
        return "\n".join(lines_text)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        self.app.copy_to_clipboard(text)
        self.app.notify("Log copied", timeout=2)
