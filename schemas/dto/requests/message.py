"""
Request DTOs for message endpoints.

SendMessageRequest — POST /messages
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from shared.validators import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH, USERNAME_MAX_LENGTH


class SendMessageRequest(BaseModel):
    """Request body for POST /messages.

    Content is not stripped: whitespace counts toward the length limits.
    """

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    content: str = Field(min_length=MESSAGE_MIN_LENGTH, max_length=MESSAGE_MAX_LENGTH)
