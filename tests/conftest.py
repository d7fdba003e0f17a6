"""
Shared fixtures.

mongomock provides real MongoDB query/update semantics; AsyncCollection
exposes it through the awaitable interface the repository expects and
yields to the event loop before every call so concurrent coroutines
interleave at store boundaries, as they would against a real server.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import mongomock
import pytest

from config import JWTSettings, VerificationSettings
from repositories.account_repository import AccountRepository
from schemas.models.account import AccountDoc
from shared.crypto import hash_password, hash_token
from shared.datetime_utils import utcnow


class AsyncCollection:
    def __init__(self, collection) -> None:
        self._col = collection

    def __getattr__(self, name):
        attr = getattr(self._col, name)

        async def call(*args, **kwargs):
            await asyncio.sleep(0)
            return attr(*args, **kwargs)

        return call


@pytest.fixture(autouse=True)
def ignore_env_file(monkeypatch):
    """Settings come only from explicit arguments and monkeypatched env vars."""
    from pydantic_settings.sources.providers import dotenv

    monkeypatch.setattr(dotenv, "dotenv_values", lambda *args, **kwargs: {})


@pytest.fixture
def raw_accounts():
    """The underlying mongomock collection, for arranging and asserting state."""
    return mongomock.MongoClient().db.accounts


@pytest.fixture
def account_repository(raw_accounts):
    raw_accounts.create_index("username", unique=True)
    raw_accounts.create_index("email", unique=True)
    return AccountRepository(AsyncCollection(raw_accounts))


@pytest.fixture
def email_provider():
    provider = AsyncMock()
    provider.send_verification_email.return_value = True
    return provider


@pytest.fixture
def verification_settings():
    return VerificationSettings(
        verify_code_ttl_seconds=3600,
        verify_code_length=6,
        resend_cooldown_seconds=60,
    )


@pytest.fixture
def jwt_settings():
    return JWTSettings(
        jwt_secret="test-secret-with-enough-length-for-hs256",
        jwt_private_key="",
        jwt_public_key="",
        cookie_secure=False,
    )


@pytest.fixture
def seed_account(raw_accounts):
    """Insert an account document directly and return its AccountDoc.

    *code* is the plaintext verification code; only its digest is stored.
    """

    def _seed(code: str = "123456", **overrides) -> AccountDoc:
        now = utcnow()
        fields = dict(
            username="alice",
            email="alice@example.com",
            password_hash=hash_password("secret123"),
            verify_code=hash_token(code),
            verify_code_expiry=now + timedelta(hours=1),
            verify_code_issued_at=now - timedelta(minutes=5),
            is_verified=True,
            is_accepting_message=True,
            created_at=now,
            updated_at=now,
        )
        fields.update(overrides)
        account = AccountDoc(**fields)
        account.id = raw_accounts.insert_one(account.to_mongo()).inserted_id
        return account

    return _seed
