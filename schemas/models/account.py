"""
Account document model.

Maps to the `accounts` MongoDB collection. One document per user; anonymous
messages are embedded in the `messages` array.

verify_code / verify_code_expiry are only consulted while is_verified is
False. Once verified they are kept but ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pydantic import Field

from schemas.models.base import MongoBaseModel, PyObjectId
from shared.validators import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH

ACCOUNT_SCHEMA_VERSION = 1


class MessageDoc(MongoBaseModel):
    """Embedded anonymous message. Never mutated after creation."""

    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    content: str = Field(min_length=MESSAGE_MIN_LENGTH, max_length=MESSAGE_MAX_LENGTH)
    created_at: datetime


class AccountDoc(MongoBaseModel):
    """Document model for the `accounts` collection."""

    username: str
    email: str
    password_hash: str
    verify_code: str  # SHA-256 hex digest, see shared.crypto.hash_token
    verify_code_expiry: datetime
    verify_code_issued_at: Optional[datetime] = None
    is_verified: bool = False
    is_accepting_message: bool = True
    messages: list[MessageDoc] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    schema_version: int = ACCOUNT_SCHEMA_VERSION
