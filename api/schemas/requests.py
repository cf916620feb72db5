"""Request schemas."""

from pydantic import BaseModel, ConfigDict, Field


class Attachment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", description="Original file name")
    mime: str = Field(default="application/octet-stream", description="MIME type")
    content_string: str = Field(
        default="",
        alias="contentString",
        description="Data URL (base64) of the attachment body",
    )


class StreamChatRequest(BaseModel):
    # Empty messages are accepted here and rejected by the session controller
    # so the 400 response carries the abort event shape.
    message: str | None = Field(default=None, description="User chat message")
    attachments: list[Attachment] = Field(
        default_factory=list,
        description="Attachments in the order the user added them",
    )
