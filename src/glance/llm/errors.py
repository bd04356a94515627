"""Failure taxonomy for the chat relay.

Hides how transport and API errors are recognized and which text the user
sees for each. The messages are user-visible and must stay stable.
"""

from enum import Enum

import httpx
import openai


class ErrorKind(str, Enum):
    """Categories of relay failures."""

    UNAUTHENTICATED = "unauthenticated"
    MODEL_NOT_FOUND = "model_not_found"
    RATE_LIMITED = "rate_limited"
    BAD_REQUEST = "bad_request"
    NETWORK_UNREACHABLE = "network_unreachable"
    UNKNOWN = "unknown"


_STATUS_KINDS = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHENTICATED,
    404: ErrorKind.MODEL_NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}

_MESSAGES = {
    ErrorKind.UNAUTHENTICATED: (
        "Invalid API key. Please check your OpenAI API key in the environment variables."
    ),
    ErrorKind.MODEL_NOT_FOUND: (
        'Model "{model}" not found. Try using "gpt-4o" or "gpt-4" instead. '
        "Update your OPENAI_MODEL in the .env file."
    ),
    ErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again in a moment.",
    ErrorKind.BAD_REQUEST: (
        "Bad request. The image might be too large or in an unsupported format."
    ),
    ErrorKind.NETWORK_UNREACHABLE: "Network error. Please check your internet connection.",
    ErrorKind.UNKNOWN: "An unexpected error occurred. Please try again.",
}

# Shown when the provider answers without any text
NO_RESPONSE_MESSAGE = "Sorry, I could not generate a response."


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception raised by a provider call to an ErrorKind.

    HTTP status errors are classified by status code. Connection failures
    (refused, DNS) count as network errors; timeouts do not.
    """
    if isinstance(error, openai.APIStatusError):
        return _STATUS_KINDS.get(error.status_code, ErrorKind.UNKNOWN)

    if isinstance(error, httpx.HTTPStatusError):
        return _STATUS_KINDS.get(error.response.status_code, ErrorKind.UNKNOWN)

    if isinstance(error, (openai.APITimeoutError, httpx.TimeoutException)):
        return ErrorKind.UNKNOWN

    if isinstance(error, (openai.APIConnectionError, httpx.ConnectError)):
        return ErrorKind.NETWORK_UNREACHABLE

    return ErrorKind.UNKNOWN


def fallback_message(kind: ErrorKind, model: str) -> str:
    """User-facing text for a failure category."""
    return _MESSAGES[kind].format(model=model)


class RelayError(Exception):
    """A classified provider failure carrying its user-facing text."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message
