"""Response channel: an incrementally written, long-lived event stream for one chat session."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from enum import Enum
from typing import Protocol, runtime_checkable

from api.schemas.responses import ResponseEvent
from core.exceptions import ChannelStateError

logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Content-Type": "text/event-stream",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
    "X-Accel-Buffering": "no",
}


class ChannelState(str, Enum):
    IDLE = "idle"
    OPEN = "open"
    CLOSED = "closed"


@runtime_checkable
class ResponseChannel(Protocol):
    """open -> write* -> close. Writes after close or disconnect are no-ops."""

    @property
    def disconnected(self) -> bool: ...

    def open(self) -> None: ...

    async def write(self, event: ResponseEvent) -> bool: ...

    async def close(self) -> None: ...


class QueueResponseChannel:
    """Channel backed by a queue drained by an sse-starlette EventSourceResponse.

    The session writes into the queue; ``events()`` is handed to the
    response and yields one SSE ``data`` frame per event until ``close``.
    """

    _END = object()

    def __init__(self, session_id: str = "") -> None:
        self.session_id = session_id
        self._queue: asyncio.Queue = asyncio.Queue()
        self._state = ChannelState.IDLE
        self._disconnected = False

    @property
    def headers(self) -> dict[str, str]:
        return dict(STREAM_HEADERS)

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def disconnected(self) -> bool:
        return self._disconnected

    def open(self) -> None:
        if self._state is not ChannelState.IDLE:
            raise ChannelStateError(f"Channel already {self._state.value}")
        self._state = ChannelState.OPEN

    async def write(self, event: ResponseEvent) -> bool:
        if self._state is ChannelState.IDLE:
            raise ChannelStateError("Channel written before open()")
        if self._state is ChannelState.CLOSED or self._disconnected:
            logger.debug("Dropping event on finished channel %s", self.session_id)
            return False
        await self._queue.put(event.to_wire())
        return True

    async def close(self) -> None:
        if self._state is ChannelState.CLOSED:
            return
        self._state = ChannelState.CLOSED
        await self._queue.put(self._END)

    async def events(self) -> AsyncIterator[dict]:
        """Drain written events as SSE frames until the channel is closed."""
        try:
            while True:
                item = await self._queue.get()
                if item is self._END:
                    break
                yield {"data": json.dumps(item)}
        except asyncio.CancelledError:
            logger.info("SSE stream cancelled for session %s", self.session_id)
            raise
        finally:
            if self._state is not ChannelState.CLOSED:
                self._disconnected = True
