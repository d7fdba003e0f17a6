"""
Registration — create or reclaim an account and deliver its verification code.

An unverified registration whose code has expired can be reclaimed by a new
registration for the same username; a verified account or a still-pending
registration cannot.

Delivery failures do not roll back the stored record: the account stays in
a pending state and the caller is expected to request a new code.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from config import VerificationSettings
from errors import (
    ConflictError,
    DependencyFailureError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from infrastructure.email.protocol import EmailProvider
from repositories.account_repository import AccountRepository
from schemas.models.account import AccountDoc
from shared.crypto import hash_password, hash_token
from shared.datetime_utils import as_utc, is_expired, utcnow
from shared.generators import generate_verify_code
from shared.logging import get_logger, redact_email
from shared.validators import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    validate_email,
    validate_username,
)

log = get_logger(__name__)

_PENDING_MESSAGE = (
    "This username is pending verification. Please try again later."
)


class RegistrationService:
    def __init__(
        self,
        accounts: AccountRepository,
        email_provider: EmailProvider,
        settings: VerificationSettings,
    ) -> None:
        self._accounts = accounts
        self._email = email_provider
        self._settings = settings

    def _new_code(self, now: datetime) -> tuple[str, datetime]:
        code = generate_verify_code(self._settings.verify_code_length)
        return code, now + timedelta(seconds=self._settings.verify_code_ttl_seconds)

    async def register(self, username: str, email: str, password: str) -> AccountDoc:
        """Register *username* and send it a verification code.

        Raises:
            ValidationError: malformed username, email or password.
            ConflictError: username taken/pending, or email already in use.
            DependencyFailureError: store unavailable or email not delivered
                (the account record is kept in the latter case).
        """
        email = email.strip().lower()
        if not validate_username(username):
            raise ValidationError(
                "Username must be 2-20 characters and contain only letters, "
                "numbers or underscores",
                field="username",
            )
        if not validate_email(email):
            raise ValidationError("Invalid email address", field="email")
        if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
            raise ValidationError(
                f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters",
                field="password",
            )

        now = utcnow()
        existing = await self._accounts.find_by_username(username)

        code, expires_at = self._new_code(now)
        if existing is not None:
            account = await self._reclaim(existing, email, password, code, expires_at, now)
        else:
            if await self._accounts.email_in_use(email):
                log.warning(
                    "registration_rejected",
                    reason="email_taken",
                    email=redact_email(email),
                )
                raise ConflictError("Email is already registered", field="email")

            account = AccountDoc(
                username=username,
                email=email,
                password_hash=hash_password(password),
                verify_code=hash_token(code),
                verify_code_expiry=expires_at,
                verify_code_issued_at=now,
                created_at=now,
                updated_at=now,
            )
            account.id = await self._accounts.insert(account)
            log.info("account_registered", username=username, account_id=str(account.id))

        await self._deliver(account, code)
        return account

    async def _reclaim(
        self,
        existing: AccountDoc,
        email: str,
        password: str,
        code: str,
        expires_at: datetime,
        now: datetime,
    ) -> AccountDoc:
        if existing.is_verified:
            log.warning("registration_rejected", reason="username_taken", username=existing.username)
            raise ConflictError("Username is already taken", field="username")

        if not is_expired(existing.verify_code_expiry, now):
            log.warning("registration_rejected", reason="pending_verification", username=existing.username)
            raise ConflictError(_PENDING_MESSAGE, field="username")

        if email != existing.email and await self._accounts.email_in_use(
            email, exclude_id=existing.id
        ):
            log.warning("registration_rejected", reason="email_taken", email=redact_email(email))
            raise ConflictError("Email is already registered", field="email")

        password_hash = hash_password(password)
        code_hash = hash_token(code)
        reclaimed = await self._accounts.reissue_code(
            existing.id,
            code_hash=code_hash,
            expires_at=expires_at,
            issued_at=now,
            observed_expiry=existing.verify_code_expiry,
            observed_issued_at=existing.verify_code_issued_at,
            extra={"email": email, "password_hash": password_hash},
        )
        if not reclaimed:
            # Another request verified or reclaimed the record first
            log.warning("registration_rejected", reason="reclaim_race", username=existing.username)
            raise ConflictError(_PENDING_MESSAGE, field="username")

        log.info("account_reclaimed", username=existing.username, account_id=str(existing.id))
        return existing.model_copy(
            update={
                "email": email,
                "password_hash": password_hash,
                "verify_code": code_hash,
                "verify_code_expiry": expires_at,
                "verify_code_issued_at": now,
                "updated_at": now,
            }
        )

    async def resend_code(self, username: str) -> AccountDoc:
        """Issue a fresh code for an unverified account and deliver it.

        Raises:
            NotFoundError: unknown username.
            ConflictError: account already verified.
            RateLimitError: the previous code was issued too recently.
            DependencyFailureError: store unavailable or email not delivered.
        """
        account = await self._accounts.find_by_username(username)
        if account is None:
            raise NotFoundError("User not found")
        if account.is_verified:
            raise ConflictError("Account is already verified")

        now = utcnow()
        cooldown = timedelta(seconds=self._settings.resend_cooldown_seconds)
        if account.verify_code_issued_at is not None:
            elapsed = now - as_utc(account.verify_code_issued_at)
            if elapsed < cooldown:
                retry_after = int((cooldown - elapsed).total_seconds()) + 1
                log.warning("resend_rate_limited", username=username, retry_after=retry_after)
                raise RateLimitError(
                    "Please wait before requesting a new code",
                    details={"retry_after_seconds": retry_after},
                )

        code, expires_at = self._new_code(now)
        code_hash = hash_token(code)
        reissued = await self._accounts.reissue_code(
            account.id,
            code_hash=code_hash,
            expires_at=expires_at,
            issued_at=now,
            observed_expiry=account.verify_code_expiry,
            observed_issued_at=account.verify_code_issued_at,
        )
        if not reissued:
            raise RateLimitError("A new code was just issued. Please check your email.")

        log.info("verification_code_reissued", username=username)
        account = account.model_copy(
            update={
                "verify_code": code_hash,
                "verify_code_expiry": expires_at,
                "verify_code_issued_at": now,
                "updated_at": now,
            }
        )
        await self._deliver(account, code)
        return account

    async def _deliver(self, account: AccountDoc, code: str) -> None:
        sent = await self._email.send_verification_email(
            account.email, account.username, code
        )
        if not sent:
            log.error(
                "verification_email_not_delivered",
                username=account.username,
                email=redact_email(account.email),
            )
            raise DependencyFailureError(
                "Account saved but the verification email could not be sent. "
                "Please request a new code."
            )
        log.info("verification_email_sent", username=account.username)
