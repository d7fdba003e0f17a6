"""
Verification — promote an account to verified with its emailed code.

Unverified -> Verified is the only transition and it is terminal. Codes are
stored as SHA-256 digests; the digest is only compared here, never
regenerated or cleared.
"""

from __future__ import annotations

from errors import ExpiredCodeError, InvalidCodeError, NotFoundError, ValidationError
from repositories.account_repository import AccountRepository
from schemas.models.account import AccountDoc
from shared.crypto import codes_match
from shared.datetime_utils import is_expired, utcnow
from shared.logging import get_logger
from shared.validators import validate_verify_code

log = get_logger(__name__)


class VerificationService:
    def __init__(self, accounts: AccountRepository, code_length: int = 6) -> None:
        self._accounts = accounts
        self._code_length = code_length

    async def verify(self, username: str, code: str) -> AccountDoc:
        """Check *code* against the stored code and expiry.

        Verifying an already-verified account is a successful no-op.

        Raises:
            ValidationError: *code* is not the configured number of digits
                (checked before any lookup).
            NotFoundError: unknown username.
            InvalidCodeError: code does not match.
            ExpiredCodeError: code matches but its expiry has passed.
        """
        if not validate_verify_code(code, self._code_length):
            raise ValidationError(
                f"Code must be {self._code_length} digits", field="code"
            )

        account = await self._accounts.find_by_username(username)
        if account is None:
            log.warning("verification_failed", reason="user_not_found", username=username)
            raise NotFoundError("User not found")

        if account.is_verified:
            log.info("verification_skipped", reason="already_verified", username=username)
            return account

        if not codes_match(account.verify_code, code):
            log.warning("verification_failed", reason="code_mismatch", username=username)
            raise InvalidCodeError("Verification code does not match")

        now = utcnow()
        if is_expired(account.verify_code_expiry, now):
            log.warning("verification_failed", reason="expired", username=username)
            raise ExpiredCodeError(
                "Verification code has expired. Please request a new code."
            )

        if not await self._accounts.mark_verified(
            account.id, code_hash=account.verify_code, now=now
        ):
            # The code was replaced between the read and the write
            log.warning("verification_failed", reason="code_replaced", username=username)
            raise InvalidCodeError("Verification code does not match")

        log.info("account_verified", username=username, account_id=str(account.id))
        return account.model_copy(update={"is_verified": True, "updated_at": now})
