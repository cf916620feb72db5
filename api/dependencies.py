"""Route dependencies: resolve workspace, thread and acting user, build the controller."""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException

from config import Settings, settings
from core.chat_engine import LangChainChatEngine
from core.models import Thread, User, Workspace
from core.session import ChatSessionController
from memory.registry import InMemoryRegistry, registry
from services.event_logs import EventLogs
from services.telemetry import Telemetry

_controller: ChatSessionController | None = None


def get_settings() -> Settings:
    return settings


def get_registry() -> InMemoryRegistry:
    return registry


def get_controller() -> ChatSessionController:
    global _controller
    if _controller is None:
        _controller = ChatSessionController(
            engine=LangChainChatEngine(store=registry),
            renamer=registry,
            telemetry=Telemetry(),
            event_logs=EventLogs(),
        )
    return _controller


async def get_workspace(
    slug: str, store: InMemoryRegistry = Depends(get_registry)
) -> Workspace:
    workspace = store.get_workspace(slug)
    if workspace is None:
        raise HTTPException(status_code=404, detail="Workspace not found")
    return workspace


async def get_thread(
    thread_slug: str,
    workspace: Workspace = Depends(get_workspace),
    store: InMemoryRegistry = Depends(get_registry),
) -> Thread:
    thread = store.get_thread(workspace, thread_slug)
    if thread is None:
        raise HTTPException(status_code=404, detail="Thread not found")
    return thread


async def get_current_user(
    x_user_id: int | None = Header(default=None),
    store: InMemoryRegistry = Depends(get_registry),
    cfg: Settings = Depends(get_settings),
) -> User | None:
    """Acting user from the ``X-User-Id`` header; optional in single-user mode."""
    user = store.get_user(x_user_id) if x_user_id is not None else None
    if user is None and cfg.multi_user_mode:
        raise HTTPException(status_code=401, detail="Invalid user session")
    return user
