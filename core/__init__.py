"""Core chat session protocol: title summarizer, quota gate, channel and controller."""

from .channel import QueueResponseChannel, ResponseChannel, STREAM_HEADERS
from .models import ChatMode, ChatRequest, Thread, User, Workspace
from .quota import QuotaGate
from .session import ChatSessionController, SessionOutcome, SessionState
from .title import summarize_title

__all__ = [
    "ChatMode",
    "ChatRequest",
    "ChatSessionController",
    "QueueResponseChannel",
    "QuotaGate",
    "ResponseChannel",
    "STREAM_HEADERS",
    "SessionOutcome",
    "SessionState",
    "Thread",
    "User",
    "Workspace",
    "summarize_title",
]
