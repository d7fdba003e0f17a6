"""Sign-in: exchange username/email + password for an owner access token."""

from __future__ import annotations

from config import JWTSettings
from errors import AuthenticationError, ForbiddenError
from repositories.account_repository import AccountRepository
from shared.crypto import verify_password
from shared.jwt_tokens import generate_access_jwt
from shared.logging import get_logger

log = get_logger(__name__)


class AuthService:
    def __init__(self, accounts: AccountRepository, settings: JWTSettings) -> None:
        self._accounts = accounts
        self._settings = settings

    async def sign_in(self, identifier: str, password: str) -> str:
        """Return a signed access token for a verified account.

        Raises:
            AuthenticationError: unknown identifier or wrong password.
            ForbiddenError: credentials are right but the account is unverified.
        """
        account = await self._accounts.find_by_identifier(identifier.strip())
        if account is None or not verify_password(password, account.password_hash):
            log.warning("sign_in_failed", reason="invalid_credentials")
            raise AuthenticationError("Invalid username/email or password")

        if not account.is_verified:
            log.warning("sign_in_failed", reason="unverified", username=account.username)
            raise ForbiddenError("Please verify your account before signing in")

        log.info("sign_in_success", username=account.username)
        return generate_access_jwt(self._settings, str(account.id), account.username)
