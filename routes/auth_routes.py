"""
Registration, verification and sign-in endpoints.

POST /register       — create or reclaim an account, email a code
POST /verify         — confirm the emailed code
POST /resend-code    — issue and email a fresh code
POST /sign-in        — exchange credentials for an access token
GET  /check-username — username availability for the sign-up form
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from config import AppSettings
from dependencies import (
    get_account_service,
    get_auth_service,
    get_registration_service,
    get_settings,
    get_verification_service,
)
from errors import ConflictError
from schemas.dto.requests.auth import (
    RegisterRequest,
    ResendCodeRequest,
    SignInRequest,
    VerifyCodeRequest,
)
from schemas.dto.responses.auth import SignInResponse
from schemas.dto.responses.common import MessageResponse, error_responses
from services.account_service import AccountService
from services.auth_service import AuthService
from services.registration_service import RegistrationService
from services.verification_service import VerificationService

router = APIRouter(
    tags=["auth"], responses=error_responses(400, 401, 403, 404, 409, 429, 500)
)


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    await service.register(body.username, body.email, body.password)
    return MessageResponse(
        success=True,
        message="User registered successfully. Please verify your account.",
    )


@router.post("/verify", response_model=MessageResponse)
async def verify(
    body: VerifyCodeRequest,
    service: VerificationService = Depends(get_verification_service),
) -> MessageResponse:
    await service.verify(body.username, body.code)
    return MessageResponse(success=True, message="Account verified successfully!")


@router.post("/resend-code", response_model=MessageResponse)
async def resend_code(
    body: ResendCodeRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    await service.resend_code(body.username)
    return MessageResponse(
        success=True, message="A new verification code has been sent."
    )


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    body: SignInRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: AppSettings = Depends(get_settings),
) -> SignInResponse:
    token = await service.sign_in(body.identifier, body.password)
    response.set_cookie(
        "access_token",
        value=token,
        httponly=True,
        secure=settings.jwt.cookie_secure,
        samesite="lax",
        path="/",
        max_age=settings.jwt.access_token_ttl_seconds,
    )
    return SignInResponse(success=True, access_token=token)


@router.get("/check-username", response_model=MessageResponse)
async def check_username(
    username: str = Query(...),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    if not await service.is_username_available(username):
        raise ConflictError("Username is already taken", field="username")
    return MessageResponse(success=True, message="Username is available")
