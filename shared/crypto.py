"""
Cryptographic helpers — password hashing and verification-code digests.

Uses argon2 for passwords (via argon2-cffi) and SHA-256 for verification
codes, which are stored only as digests.
"""

from __future__ import annotations

import hashlib
import hmac

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_password_hasher = PasswordHasher()


def hash_password(plain_password: str) -> str:
    """Hash *plain_password* with argon2id.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return _password_hasher.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify *plain_password* against an argon2 *password_hash*.

    Returns:
        ``True`` if the password matches, ``False`` for a wrong password or
        a malformed hash.
    """
    try:
        return _password_hasher.verify(password_hash, plain_password)
    except (VerificationError, InvalidHashError):
        return False


def hash_token(token: str) -> str:
    """Return the hex-encoded SHA-256 digest of *token*.

    Verification codes are hashed with this before they are stored, so the
    plaintext code only ever exists in the outgoing email.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def codes_match(stored_hash: str, submitted: str) -> bool:
    """Constant-time check of a submitted code against its stored digest."""
    return hmac.compare_digest(
        stored_hash.encode("utf-8"), hash_token(submitted).encode("utf-8")
    )
