"""
Response DTOs for account endpoints.

AccountStatusResponse  — GET /account/{username}
AcceptMessagesResponse — GET/POST /accept-messages
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AccountStatusResponse(BaseModel):
    """Public status of a verified account, shown on the profile page."""

    model_config = ConfigDict(populate_by_name=True)

    exists: bool
    is_accepting_message: bool = Field(alias="isAcceptingMessage")


class AcceptMessagesResponse(BaseModel):
    """Owner's current acceptance toggle."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    is_accepting_message: bool = Field(alias="isAcceptingMessage")
