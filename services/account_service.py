"""Account lookups and the owner's accept-messages preference."""

from __future__ import annotations

from errors import NotFoundError, ValidationError
from repositories.account_repository import AccountRepository
from schemas.dto.identity import OwnerIdentity
from schemas.models.account import AccountDoc
from shared.datetime_utils import utcnow
from shared.logging import get_logger
from shared.validators import validate_username

log = get_logger(__name__)


class AccountService:
    def __init__(self, accounts: AccountRepository) -> None:
        self._accounts = accounts

    async def is_username_available(self, username: str) -> bool:
        """A username is available unless a verified account holds it."""
        if not validate_username(username):
            raise ValidationError(
                "Username must be 2-20 characters and contain only letters, "
                "numbers or underscores",
                field="username",
            )
        account = await self._accounts.find_by_username(username)
        return account is None or not account.is_verified

    async def get_public_status(self, username: str) -> AccountDoc:
        """Return the account behind a public profile link.

        Unverified accounts are reported exactly like missing ones.
        """
        account = await self._accounts.find_by_username(username)
        if account is None or not account.is_verified:
            raise NotFoundError("User not found")
        return account

    async def get_accepting_messages(self, owner: OwnerIdentity) -> bool:
        account = await self._accounts.find_by_id(owner.object_id)
        if account is None:
            raise NotFoundError("User not found")
        return account.is_accepting_message

    async def set_accepting_messages(self, owner: OwnerIdentity, accepting: bool) -> bool:
        if not await self._accounts.set_accepting_messages(
            owner.object_id, accepting, utcnow()
        ):
            raise NotFoundError("User not found")
        log.info("accept_messages_updated", username=owner.username, accepting=accepting)
        return accepting
