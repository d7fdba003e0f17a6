"""
Request DTOs for account preference endpoints.

AcceptMessagesRequest — POST /accept-messages
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AcceptMessagesRequest(BaseModel):
    """Request body for POST /accept-messages."""

    model_config = ConfigDict(populate_by_name=True)

    accept_messages: bool = Field(alias="acceptMessages")
