"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived clients (Mongo, HTTP, email provider)
are created once in the app lifespan and read from app.state.
"""

from __future__ import annotations

from typing import Optional

import jwt
from bson import ObjectId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import AppSettings
from errors import AuthenticationError
from infrastructure.email.protocol import EmailProvider
from repositories.account_repository import AccountRepository
from schemas.dto.identity import OwnerIdentity
from services.account_service import AccountService
from services.auth_service import AuthService
from services.message_service import MessageService
from services.registration_service import RegistrationService
from services.verification_service import VerificationService
from shared.jwt_tokens import verify_access_jwt

_bearer = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_account_repository(request: Request) -> AccountRepository:
    return request.app.state.account_repository


def get_email_provider(request: Request) -> EmailProvider:
    return request.app.state.email_provider


def get_registration_service(
    accounts: AccountRepository = Depends(get_account_repository),
    email_provider: EmailProvider = Depends(get_email_provider),
    settings: AppSettings = Depends(get_settings),
) -> RegistrationService:
    return RegistrationService(accounts, email_provider, settings.verification)


def get_verification_service(
    accounts: AccountRepository = Depends(get_account_repository),
    settings: AppSettings = Depends(get_settings),
) -> VerificationService:
    return VerificationService(accounts, settings.verification.verify_code_length)


def get_message_service(
    accounts: AccountRepository = Depends(get_account_repository),
) -> MessageService:
    return MessageService(accounts)


def get_account_service(
    accounts: AccountRepository = Depends(get_account_repository),
) -> AccountService:
    return AccountService(accounts)


def get_auth_service(
    accounts: AccountRepository = Depends(get_account_repository),
    settings: AppSettings = Depends(get_settings),
) -> AuthService:
    return AuthService(accounts, settings.jwt)


def get_current_owner(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    settings: AppSettings = Depends(get_settings),
) -> OwnerIdentity:
    """Resolve the signed-in owner from a bearer token or the access_token cookie."""
    token = credentials.credentials if credentials else request.cookies.get("access_token")
    if not token:
        raise AuthenticationError("Not authenticated")

    try:
        claims = verify_access_jwt(settings.jwt, token)
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid or expired token") from e

    username = claims.get("username")
    if not username or not ObjectId.is_valid(claims["sub"]):
        raise AuthenticationError("Invalid or expired token")
    return OwnerIdentity(account_id=claims["sub"], username=username)
