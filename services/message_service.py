"""
Message intake and owner message management.

Sending is open to anyone; the target must exist, be verified and be
accepting messages at the moment of the append. Unknown and unverified
targets are both reported as "User not found" so senders cannot probe
verification status.
"""

from __future__ import annotations

from bson import ObjectId

from errors import ForbiddenError, NotFoundError, ValidationError
from repositories.account_repository import AccountRepository
from schemas.dto.identity import OwnerIdentity
from schemas.models.account import MessageDoc
from shared.datetime_utils import utcnow
from shared.logging import get_logger
from shared.validators import (
    MESSAGE_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    validate_message_content,
)

log = get_logger(__name__)


class MessageService:
    def __init__(self, accounts: AccountRepository) -> None:
        self._accounts = accounts

    async def send(self, username: str, content: str) -> MessageDoc:
        """Append an anonymous message to *username*'s inbox.

        Raises:
            ValidationError: content length outside 1-300 (checked before any lookup).
            NotFoundError: no such account, or the account is unverified.
            ForbiddenError: the account is not accepting messages.
        """
        if not validate_message_content(content):
            raise ValidationError(
                f"Content must be between {MESSAGE_MIN_LENGTH} and "
                f"{MESSAGE_MAX_LENGTH} characters",
                field="content",
            )

        message = MessageDoc(content=content, created_at=utcnow())
        if await self._accounts.append_message_if_accepting(username, message):
            log.info("message_received", username=username, message_id=str(message.id))
            return message

        # Nothing was written; classify the rejection
        account = await self._accounts.find_by_username(username)
        if account is None or not account.is_verified:
            log.info("message_rejected", reason="user_not_found", username=username)
            raise NotFoundError("User not found")

        log.info("message_rejected", reason="not_accepting", username=username)
        raise ForbiddenError("User is not accepting messages")

    async def list_messages(self, owner: OwnerIdentity) -> list[MessageDoc]:
        messages = await self._accounts.list_messages(owner.object_id)
        if messages is None:
            raise NotFoundError("User not found")
        return messages

    async def delete_message(self, owner: OwnerIdentity, message_id: str) -> None:
        if not ObjectId.is_valid(message_id):
            raise ValidationError("Invalid message id", field="id")

        if not await self._accounts.delete_message(owner.object_id, ObjectId(message_id)):
            raise NotFoundError("Message not found or already deleted")

        log.info("message_deleted", username=owner.username, message_id=message_id)
