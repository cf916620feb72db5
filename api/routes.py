"""Workspace chat routes and SSE streaming."""

from __future__ import annotations

import asyncio
import logging
from uuid import uuid4

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from api.dependencies import get_controller, get_current_user, get_thread, get_workspace
from api.schemas import AbortEvent, StreamChatRequest
from core.channel import QueueResponseChannel
from core.exceptions import ChatValidationError
from core.models import AttachmentRef, Thread, User, Workspace
from core.session import ChatSessionController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")

# Running sessions; keeps a strong reference until each task finishes.
_sessions: set[asyncio.Task] = set()


def _start_session(
    controller: ChatSessionController,
    body: StreamChatRequest,
    workspace: Workspace,
    user: User | None,
    thread: Thread | None = None,
) -> JSONResponse | EventSourceResponse:
    try:
        chat = controller.validate(
            body.message,
            [
                AttachmentRef(name=a.name, mime=a.mime, content_string=a.content_string)
                for a in body.attachments
            ],
        )
    except ChatValidationError as e:
        return JSONResponse(
            status_code=e.http_status, content=AbortEvent(error=e.message).to_wire()
        )

    session_id = str(uuid4())
    channel = QueueResponseChannel(session_id=session_id)
    task = asyncio.create_task(
        controller.run(chat, channel, workspace, user, thread),
        name=f"chat-session-{session_id}",
    )
    _sessions.add(task)
    task.add_done_callback(_sessions.discard)
    logger.info(
        "Chat session %s started (workspace=%s, thread=%s)",
        session_id,
        workspace.slug,
        thread.slug if thread else None,
    )
    return EventSourceResponse(channel.events(), headers=channel.headers)


@router.post("/workspace/{slug}/stream-chat")
async def stream_workspace_chat(
    body: StreamChatRequest,
    workspace: Workspace = Depends(get_workspace),
    user: User | None = Depends(get_current_user),
    controller: ChatSessionController = Depends(get_controller),
):
    """Stream a reply to one message in the workspace's default conversation."""
    return _start_session(controller, body, workspace, user)


@router.post("/workspace/{slug}/thread/{thread_slug}/stream-chat")
async def stream_thread_chat(
    body: StreamChatRequest,
    workspace: Workspace = Depends(get_workspace),
    thread: Thread = Depends(get_thread),
    user: User | None = Depends(get_current_user),
    controller: ChatSessionController = Depends(get_controller),
):
    """Stream a reply within a thread; the first message may rename the thread."""
    return _start_session(controller, body, workspace, user, thread)
