"""Errors raised while running a chat session.

Everything the session controller turns into a client-visible abort derives
from ChatSessionError. Only validation errors map to an HTTP status; the
rest are delivered as streamed abort events.
"""


class ChatSessionError(Exception):
    """Base class. ``message`` is what the client sees."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ChatValidationError(ChatSessionError):
    http_status = 400


class EmptyMessageError(ChatValidationError):
    def __init__(self) -> None:
        super().__init__("Message is empty.")


class QuotaExceededError(ChatSessionError):
    """Daily chat quota used up; streamed as an abort event, not an HTTP error."""

    def __init__(self, limit: int | None) -> None:
        self.limit = limit
        super().__init__(
            f"You have met your maximum 24 hour chat quota of {limit} chats. Try again later."
        )


class ChannelStateError(RuntimeError):
    """Response channel used out of order (write before open, double open)."""


class EngineError(ChatSessionError):
    """The chat engine could not produce a reply."""
