"""
Request DTOs for registration, verification and sign-in endpoints.

RegisterRequest    — POST /register
VerifyCodeRequest  — POST /verify
ResendCodeRequest  — POST /resend-code
SignInRequest      — POST /sign-in
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from shared.validators import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    USERNAME_PATTERN,
    VERIFY_CODE_MAX_LENGTH,
)


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
    )
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, v: str) -> str:
        return v.lower()


class VerifyCodeRequest(BaseModel):
    """Request body for POST /verify.

    ``code`` is the numeric code sent to the user's email address. Its
    exact length is configurable and checked by the verification service.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    code: str = Field(min_length=1, max_length=VERIFY_CODE_MAX_LENGTH)


class ResendCodeRequest(BaseModel):
    """Request body for POST /resend-code."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)


class SignInRequest(BaseModel):
    """Request body for POST /sign-in.

    ``identifier`` may be either the username or the email address.
    """

    model_config = ConfigDict(populate_by_name=True)

    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)
