"""
Response DTOs for authentication endpoints.

SignInResponse — POST /sign-in (200)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SignInResponse(BaseModel):
    """Response body for POST /sign-in (200)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    access_token: str
    token_type: str = "bearer"
