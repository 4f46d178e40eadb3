"""UI configuration constants.

Keeps display limits and formats out of the widget code.
"""

from enum import IntEnum


class LogLevel(IntEnum):
    """Log panel threshold. Entries below the threshold are hidden."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """Parse a level name such as "info"; unknown names mean DEBUG."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            return cls.DEBUG


INPUT_HISTORY_MAX_SIZE = 100  # Prompts remembered by the input bar

LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

CHAT_TITLE_MAX_LENGTH = 32  # Characters shown per entry in the chat list
LOADING_MARKER = "…"  # Appended to chats with a request in flight

MESSAGE_TIMESTAMP_FORMAT = "%H:%M"
