"""CSS styles for the overlay.

Hides layout decisions from the application logic: the input bar at
the top, the chat panel below it and the log panel at the bottom.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#overlay {
    height: auto;
    max-height: 100%;

    &.-hidden {
        display: none;
    }
}

#hidden-hint {
    display: none;
    color: $text-muted;
    padding: 0 1;

    &.visible {
        display: block;
    }
}

/* Screen capture indicator */
#capture-indicator {
    height: 0;
    background: $success;
    color: $background;
    text-style: bold;
    padding: 0 1;

    &.active {
        height: 1;
    }
}

/* Input bar */
#input-bar {
    height: 3;
    background: $surface;
    border: round $primary 60%;

    &:focus-within {
        border: round $primary;
    }

    &.-processing {
        border: round $warning;
    }
}

#status-indicator {
    width: 2;
    color: $success;
    padding: 0 0 0 1;
}

#overlay-input {
    width: 1fr;
    border: none;
    background: transparent;
    padding: 0 1;
}

#shortcuts {
    width: auto;
    color: $text-muted;
    padding: 0 1;
}

/* Loading */
#processing {
    height: 1;
    color: $warning;
    padding: 0 2;
}

/* Chat */
#chat-panel {
    height: auto;
    max-height: 24;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-subtitle-color: $text-muted;
    padding: 0 1;
}

.chat-message {
    margin: 0 0 1 0;
    padding: 0 1;
    height: auto;
}

.chat-message.user {
    color: $text;
    text-style: bold;
    border-left: thick $secondary;
}

.chat-message.assistant {
    border-left: thick $primary;
}

.chat-message.streaming {
    color: $text-muted;
}

/* Log */
#debug-panel {
    height: 10;
    border: round $border;
    border-title-color: $accent;
}
"""
