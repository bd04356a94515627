"""UI configuration constants.

Centralizes user-visible strings and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Input placeholders
DEFAULT_PLACEHOLDER = "Ask me anything... (Enter to chat, Ctrl+S to capture screen)"
SCREEN_PLACEHOLDER = "What would you like to know about this screen?"

# Assistant messages injected by the UI itself
STREAM_ERROR_MESSAGE = "Sorry, there was an error processing your request."
CAPTURE_FAILED_MESSAGE = "Failed to capture screen. Please try again."
CAPTURE_ERROR_MESSAGE = "Error capturing screen."

# Screen capture thumbnail bounds (width, height)
CAPTURE_MAX_SIZE = (1920, 1080)

# Streaming display
STREAMING_CURSOR = "▋"

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages
