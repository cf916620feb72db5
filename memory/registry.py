"""In-process registry for workspaces, threads, users and chat history.

Stands in for the persistence layer: routes resolve slugs through it, the
default chat engine stores chats in it, and it decides thread auto-renames.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from itertools import count

from core.models import (
    DEFAULT_THREAD_NAME,
    ChatMode,
    ChatRecord,
    Thread,
    User,
    Workspace,
)

logger = logging.getLogger(__name__)

QUOTA_WINDOW_SECONDS = 24 * 60 * 60


class InMemoryRegistry:
    def __init__(self) -> None:
        self._workspaces: dict[str, Workspace] = {}
        self._threads: dict[tuple[int, str], Thread] = {}
        self._users: dict[int, User] = {}
        self._chats: list[ChatRecord] = []
        self._ids = count(1)

    # ── Workspaces / threads / users ────────────────────────────

    def create_workspace(
        self,
        slug: str,
        name: str,
        chat_mode: ChatMode = ChatMode.CHAT,
        chat_model: str | None = None,
    ) -> Workspace:
        workspace = Workspace(
            id=next(self._ids),
            slug=slug,
            name=name,
            chat_mode=chat_mode,
            chat_model=chat_model,
        )
        self._workspaces[slug] = workspace
        return workspace

    def get_workspace(self, slug: str) -> Workspace | None:
        return self._workspaces.get(slug)

    def create_thread(
        self, workspace: Workspace, slug: str, user: User | None = None
    ) -> Thread:
        thread = Thread(
            id=next(self._ids),
            slug=slug,
            workspace_id=workspace.id,
            user_id=user.id if user else None,
        )
        self._threads[(workspace.id, slug)] = thread
        return thread

    def get_thread(self, workspace: Workspace, slug: str) -> Thread | None:
        return self._threads.get((workspace.id, slug))

    def create_user(
        self, username: str, daily_message_limit: int | None = None
    ) -> User:
        user = User(
            id=next(self._ids),
            username=username,
            daily_message_limit=daily_message_limit,
        )
        self._users[user.id] = user
        return user

    def get_user(self, user_id: int, now: float | None = None) -> User | None:
        """Return the user with ``messages_last_24h`` counted as of ``now``."""
        user = self._users.get(user_id)
        if user is None:
            return None
        user.messages_last_24h = self.count_recent_chats(user.id, now=now)
        return user

    # ── Chats ───────────────────────────────────────────────────

    def record_chat(
        self,
        workspace: Workspace,
        prompt: str,
        response: str,
        user: User | None = None,
        thread: Thread | None = None,
        now: float | None = None,
    ) -> ChatRecord:
        record = ChatRecord(
            workspace_id=workspace.id,
            prompt=prompt,
            response=response,
            user_id=user.id if user else None,
            thread_id=thread.id if thread else None,
            created_at=time.time() if now is None else now,
        )
        self._chats.append(record)
        if user is not None:
            user.messages_last_24h = self.count_recent_chats(user.id, now=now)
        return record

    def count_recent_chats(self, user_id: int, now: float | None = None) -> int:
        now = time.time() if now is None else now
        since = now - QUOTA_WINDOW_SECONDS
        return sum(1 for c in self._chats if c.user_id == user_id and c.created_at >= since)

    def history(
        self,
        workspace: Workspace,
        thread: Thread | None = None,
        user: User | None = None,
        limit: int = 20,
    ) -> list[ChatRecord]:
        """Most recent chats for the workspace (or thread), oldest first."""
        thread_id = thread.id if thread else None
        user_id = user.id if user else None
        chats = [
            c
            for c in self._chats
            if c.workspace_id == workspace.id
            and c.thread_id == thread_id
            and (user_id is None or c.user_id == user_id)
        ]
        return chats[-limit:] if limit > 0 else []

    def thread_chat_count(self, thread: Thread) -> int:
        return sum(1 for c in self._chats if c.thread_id == thread.id)

    # ── Thread auto-rename ──────────────────────────────────────

    async def auto_rename_thread(
        self,
        *,
        thread: Thread,
        workspace: Workspace,
        user: User | None,
        new_name: str,
    ) -> Thread | None:
        """Rename a thread on its first chat only, while it still has the default name."""
        if not new_name:
            return None
        current = self._threads.get((workspace.id, thread.slug), thread)
        if current.name != DEFAULT_THREAD_NAME:
            return None
        if self.thread_chat_count(current) != 1:
            return None
        renamed = replace(current, name=new_name)
        self._threads[(workspace.id, thread.slug)] = renamed
        logger.info("Thread %s renamed to %r", thread.slug, new_name)
        return renamed


registry = InMemoryRegistry()
