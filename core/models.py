"""Records the chat session works with: workspaces, threads, users and one chat request."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_THREAD_NAME = "Thread"


class ChatMode(str, Enum):
    CHAT = "chat"
    QUERY = "query"


@dataclass
class Workspace:
    """Workspace the chat runs in. Read-only for the session."""

    id: int
    slug: str
    name: str
    chat_mode: ChatMode = ChatMode.CHAT
    chat_model: str | None = None
    system_prompt: str = ""
    query_refusal_response: str = ""


@dataclass
class Thread:
    """Conversation thread scoped to a workspace."""

    id: int
    slug: str
    workspace_id: int
    name: str = DEFAULT_THREAD_NAME
    user_id: int | None = None


@dataclass
class User:
    """Acting user; limit None means unlimited."""

    id: int
    username: str
    daily_message_limit: int | None = None
    messages_last_24h: int = 0


@dataclass
class AttachmentRef:
    """An attachment sent with a chat message (data-URL payload)."""

    name: str
    mime: str
    content_string: str


@dataclass
class ChatRequest:
    message: str
    attachments: list[AttachmentRef] = field(default_factory=list)

    @property
    def multimodal(self) -> bool:
        return len(self.attachments) != 0


@dataclass
class ChatRecord:
    """One stored prompt/response pair."""

    workspace_id: int
    prompt: str
    response: str
    user_id: int | None = None
    thread_id: int | None = None
    created_at: float = 0.0
