"""
Response DTOs for message endpoints.

MessageOut          — a stored message as returned to clients
SendMessageResponse — POST /messages (201)
MessagesResponse    — GET /messages (200)
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from schemas.models.account import MessageDoc


class MessageOut(BaseModel):
    """A stored message; ``id`` is the hex ObjectId."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_doc(cls, doc: MessageDoc) -> "MessageOut":
        return cls(id=str(doc.id), content=doc.content, created_at=doc.created_at)


class SendMessageResponse(BaseModel):
    """Response body for POST /messages (201)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: MessageOut


class MessagesResponse(BaseModel):
    """Response body for GET /messages (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    messages: list[MessageOut]
