"""Event shapes written to the chat event stream.

Field names are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``). Every event gets a fresh ``id`` nonce.
"""

from __future__ import annotations

from typing import Any, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def _event_id() -> str:
    return str(uuid4())


class _StreamEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_event_id)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class AbortEvent(_StreamEvent):
    """Terminal failure event; also the body of a 400 validation response."""

    type: Literal["abort"] = "abort"
    text_response: None = Field(default=None, alias="textResponse")
    sources: list[dict] = []
    close: bool = True
    error: str | None = None


class TextResponseEvent(_StreamEvent):
    """Incremental (``textResponseChunk``) or whole (``textResponse``) reply content."""

    type: Literal["textResponseChunk", "textResponse"] = "textResponseChunk"
    text_response: str = Field(default="", alias="textResponse")
    sources: list[dict] = []
    close: bool = False
    error: bool = False


class ThreadRef(BaseModel):
    slug: str
    name: str


class RenameThreadAction(_StreamEvent):
    """Out-of-band notice that the thread picked up a new name."""

    action: Literal["rename_thread"] = "rename_thread"
    thread: ThreadRef


ResponseEvent = Union[AbortEvent, TextResponseEvent, RenameThreadAction]


class HealthOut(BaseModel):
    status: str = "healthy"
    service: str = "workspace-chat"
