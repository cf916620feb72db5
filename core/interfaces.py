"""Collaborators the chat session calls out to."""

from __future__ import annotations

from typing import Any, Protocol

from core.channel import ResponseChannel
from core.models import AttachmentRef, ChatMode, Thread, User, Workspace


class ChatEngine(Protocol):
    """Streams the reply for one message into the channel.

    The engine writes its own text and terminal events and is expected to
    stop when ``channel.disconnected`` turns true.
    """

    async def stream_chat(
        self,
        *,
        channel: ResponseChannel,
        workspace: Workspace,
        message: str,
        chat_mode: ChatMode,
        user: User | None,
        thread: Thread | None,
        attachments: list[AttachmentRef],
    ) -> None: ...


class ThreadRenamer(Protocol):
    async def auto_rename_thread(
        self,
        *,
        thread: Thread,
        workspace: Workspace,
        user: User | None,
        new_name: str,
    ) -> Thread | None:
        """Return the renamed thread, or None when the rename did not apply."""
        ...


class TelemetrySink(Protocol):
    async def send_telemetry(self, event: str, properties: dict[str, Any]) -> None: ...


class EventLogSink(Protocol):
    async def log_event(
        self, event: str, metadata: dict[str, Any], user_id: int | None = None
    ) -> None: ...
