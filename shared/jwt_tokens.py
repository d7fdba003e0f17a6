"""
Access token helpers — issue and verify owner JWTs.

RS256 is used when both keys are configured, otherwise HS256 with
JWT_SECRET. Keys supplied through env vars may contain literal ``\\n``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from config import JWTSettings


def _algorithm(settings: JWTSettings) -> str:
    return "RS256" if settings.use_rs256 else "HS256"


def _signing_key(settings: JWTSettings) -> str:
    if settings.use_rs256:
        return settings.jwt_private_key.replace("\\n", "\n")
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set when RS256 keys are not provided")
    return settings.jwt_secret


def _verification_key(settings: JWTSettings) -> str:
    if settings.use_rs256:
        return settings.jwt_public_key.replace("\\n", "\n")
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set when RS256 keys are not provided")
    return settings.jwt_secret


def generate_access_jwt(settings: JWTSettings, account_id: str, username: str) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "sub": account_id,
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.access_token_ttl_seconds)).timestamp()),
    }
    return jwt.encode(claims, _signing_key(settings), algorithm=_algorithm(settings))


def verify_access_jwt(settings: JWTSettings, token: str) -> dict[str, Any]:
    """Decode *token*, checking signature, expiry, issuer and audience.

    Raises:
        jwt.InvalidTokenError: for any invalid or expired token.
    """
    return jwt.decode(
        token,
        _verification_key(settings),
        algorithms=[_algorithm(settings)],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"require": ["sub", "exp"]},
    )
