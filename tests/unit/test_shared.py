"""
Unit tests for the shared/ utility modules.

Covers:
- shared.validators      (username, email, message content, verify code)
- shared.generators      (generate_verify_code)
- shared.datetime_utils  (utcnow, as_utc, is_expired)
- shared.crypto          (hash_password, verify_password, hash_token, codes_match)
- shared.jwt_tokens      (generate_access_jwt, verify_access_jwt)
- shared.logging         (redact_email, redact_sensitive_fields)
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from config import JWTSettings
from shared.crypto import codes_match, hash_password, hash_token, verify_password
from shared.datetime_utils import as_utc, is_expired, utcnow
from shared.generators import generate_verify_code
from shared.jwt_tokens import generate_access_jwt, verify_access_jwt
from shared.logging import redact_email, redact_sensitive_fields
from shared.validators import (
    validate_email,
    validate_message_content,
    validate_username,
    validate_verify_code,
)


# ---------------------------------------------------------------------------
# validators
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "username, expected",
    [
        ("al", True),
        ("alice_99", True),
        ("x" * 20, True),
        ("a", False),
        ("x" * 21, False),
        ("alice!", False),
        ("", False),
    ],
)
def test_validate_username(username, expected):
    assert validate_username(username) is expected


@pytest.mark.parametrize(
    "email, expected",
    [("user@example.com", True), ("user@", False), ("plainaddress", False)],
)
def test_validate_email(email, expected):
    assert validate_email(email) is expected


@pytest.mark.parametrize(
    "content, expected",
    [("", False), ("a", True), ("a" * 300, True), ("a" * 301, False)],
    ids=["empty", "one", "max", "over"],
)
def test_validate_message_content(content, expected):
    assert validate_message_content(content) is expected


@pytest.mark.parametrize(
    "code, length, expected",
    [
        ("000123", 6, True),
        ("12345", 6, False),
        ("12345a", 6, False),
        ("12345678", 8, True),
        ("123456", 8, False),
    ],
)
def test_validate_verify_code(code, length, expected):
    assert validate_verify_code(code, length) is expected


# ---------------------------------------------------------------------------
# generators
# ---------------------------------------------------------------------------


class TestGenerateVerifyCode:
    def test_default_is_six_digits(self):
        code = generate_verify_code()
        assert len(code) == 6
        assert code.isdigit()

    def test_custom_length(self):
        assert len(generate_verify_code(8)) == 8

    def test_codes_vary(self):
        assert len({generate_verify_code() for _ in range(50)}) > 1


# ---------------------------------------------------------------------------
# datetime_utils
# ---------------------------------------------------------------------------


class TestDatetimeUtils:
    def test_utcnow_is_aware_and_millisecond_precise(self):
        now = utcnow()
        assert now.tzinfo is not None
        assert now.microsecond % 1000 == 0

    def test_as_utc_treats_naive_as_utc(self):
        naive = datetime(2025, 1, 1, 12, 0)
        assert as_utc(naive) == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_is_expired(self):
        now = utcnow()
        assert is_expired(now - timedelta(seconds=1), now) is True
        assert is_expired(now + timedelta(seconds=1), now) is False

    def test_expiry_instant_is_still_valid(self):
        now = utcnow()
        assert is_expired(now, now) is False
        assert is_expired(now - timedelta(milliseconds=1), now) is True

    def test_is_expired_accepts_naive_expiry(self):
        now = utcnow()
        naive_future = (now + timedelta(minutes=5)).replace(tzinfo=None)
        assert is_expired(naive_future, now) is False


# ---------------------------------------------------------------------------
# crypto
# ---------------------------------------------------------------------------


class TestCrypto:
    def test_hash_is_not_plaintext(self):
        h = hash_password("secret123")
        assert "secret123" not in h
        assert h.startswith("$argon2")

    def test_verify_password(self):
        h = hash_password("secret123")
        assert verify_password("secret123", h) is True
        assert verify_password("wrong", h) is False

    def test_verify_password_malformed_hash(self):
        assert verify_password("secret123", "not-a-hash") is False

    def test_hash_token_is_sha256_hex(self):
        digest = hash_token("123456")
        assert digest == hashlib.sha256(b"123456").hexdigest()
        assert "123456" not in digest

    def test_codes_match_compares_against_digest(self):
        stored = hash_token("123456")
        assert codes_match(stored, "123456") is True
        assert codes_match(stored, "654321") is False
        assert codes_match("123456", "123456") is False


# ---------------------------------------------------------------------------
# jwt_tokens
# ---------------------------------------------------------------------------


@pytest.fixture
def hs256_settings():
    return JWTSettings(jwt_secret="unit-test-secret-with-enough-length", jwt_private_key="", jwt_public_key="")


class TestJwtTokens:
    def test_round_trip_claims(self, hs256_settings):
        token = generate_access_jwt(hs256_settings, "507f1f77bcf86cd799439011", "alice")
        claims = verify_access_jwt(hs256_settings, token)
        assert claims["sub"] == "507f1f77bcf86cd799439011"
        assert claims["username"] == "alice"

    def test_rejects_other_secret(self, hs256_settings):
        token = generate_access_jwt(hs256_settings, "id", "alice")
        other = JWTSettings(jwt_secret="another-secret-with-enough-length", jwt_private_key="", jwt_public_key="")
        with pytest.raises(jwt.InvalidTokenError):
            verify_access_jwt(other, token)

    def test_rejects_expired(self, hs256_settings):
        expired = hs256_settings.model_copy(update={"access_token_ttl_seconds": -10})
        token = generate_access_jwt(expired, "id", "alice")
        with pytest.raises(jwt.ExpiredSignatureError):
            verify_access_jwt(hs256_settings, token)

    def test_missing_secret_raises(self):
        with pytest.raises(RuntimeError):
            generate_access_jwt(JWTSettings(jwt_secret="", jwt_private_key="", jwt_public_key=""), "id", "alice")


# ---------------------------------------------------------------------------
# logging helpers
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "email, expected",
    [
        ("john.doe@gmail.com", "j******e@gmail.com"),
        ("ab@gmail.com", "a*b@gmail.com"),
        ("a@gmail.com", "a@gmail.com"),
        ("no-at-sign", "<redacted>"),
        (None, "<redacted>"),
    ],
)
def test_redact_email(email, expected):
    assert redact_email(email) == expected


def test_redact_sensitive_fields():
    event = {
        "event": "account_registered",
        "password": "secret",
        "verify_code": "123456",
        "access_token": "abc",
        "username": "alice",
        "status_code": 200,
    }
    out = redact_sensitive_fields(None, "info", event)
    assert out["password"] == "***REDACTED***"
    assert out["verify_code"] == "***REDACTED***"
    assert out["access_token"] == "***REDACTED***"
    assert out["username"] == "alice"
    assert out["status_code"] == 200
    assert out["event"] == "account_registered"
