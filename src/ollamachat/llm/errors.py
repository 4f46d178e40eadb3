"""Errors raised by generation backends.

Each failure reason gets its own type so callers can log or branch on it
without inspecting messages.
"""


class OllamaError(Exception):
    """Base class for backend errors."""

    def is_retryable(self) -> bool:
        """Override in subclasses to report whether a retry could succeed."""
        return False


class OllamaNetworkError(OllamaError):
    """Connection failure or timeout before a response arrived."""

    def __init__(self, message: str):
        super().__init__(f"Network error: {message}")

    def is_retryable(self) -> bool:
        return True


class OllamaProtocolError(OllamaError):
    """Server answered with a status other than 200."""

    def __init__(self, status_code: int, message: str = ""):
        msg = f"Unexpected HTTP status {status_code}"
        if message:
            msg += f": {message}"
        super().__init__(msg)
        self.status_code = status_code

    def is_retryable(self) -> bool:
        return self.status_code >= 500


class OllamaDecodeError(OllamaError):
    """Response body is not JSON or does not match the expected shape."""

    def __init__(self, message: str):
        super().__init__(f"Decode error: {message}")
