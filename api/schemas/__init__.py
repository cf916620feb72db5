"""API request/response schemas (Pydantic)."""

from api.schemas.requests import Attachment, StreamChatRequest
from api.schemas.responses import (
    AbortEvent,
    HealthOut,
    RenameThreadAction,
    ResponseEvent,
    TextResponseEvent,
    ThreadRef,
)

__all__ = [
    "Attachment",
    "StreamChatRequest",
    "AbortEvent",
    "TextResponseEvent",
    "RenameThreadAction",
    "ThreadRef",
    "ResponseEvent",
    "HealthOut",
]
