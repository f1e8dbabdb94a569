"""Error types and user-facing error messages.

Command failures never end the session; they are shown in the error overlay.
``user_friendly_message`` turns arbitrary exceptions into one short line.
"""

from __future__ import annotations


class HarveyError(Exception):
    """Base class for errors whose message is already fit for display."""


class ChatNotFoundError(HarveyError):
    def __init__(self, chat_id: int) -> None:
        super().__init__("Chat not found")
        self.chat_id = chat_id


UNKNOWN_ERROR_MESSAGE = "An unknown error occurred. Please check the error log for details."

# Checked in order; the first rule whose needles appear in the message wins.
_FRIENDLY_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("api key", "authentication", "unauthorized"), "Invalid or missing API key. Please check your config file."),
    (("rate limit", "429"), "Rate limited. Please wait a moment and try again."),
    (("database", "sql"), "Database error. Please check your data directory permissions."),
    (("network", "econnrefused"), "Network error. Please check your connection and try again."),
    (("connection",), "Connection error. Please check your connection and try again."),
    (("model", "not found"), "AI model error. The requested model may not be available."),
    (("config", "parse"), "Configuration error. Please check your config file format."),
)


def user_friendly_message(error: object) -> str:
    """Return a short message suitable for the error overlay."""
    if isinstance(error, str):
        return error
    if not isinstance(error, BaseException):
        return UNKNOWN_ERROR_MESSAGE

    message = str(error)
    if isinstance(error, HarveyError):
        return message or type(error).__name__

    lowered = message.lower()
    for needles, friendly in _FRIENDLY_RULES:
        if any(needle in lowered for needle in needles):
            return friendly
    return message or type(error).__name__


__all__ = [
    "HarveyError",
    "ChatNotFoundError",
    "UNKNOWN_ERROR_MESSAGE",
    "user_friendly_message",
]
