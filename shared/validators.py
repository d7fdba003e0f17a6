"""
Input validators — framework-agnostic, pure functions.

Shared by the request DTOs and the service layer so that rules are
enforced even when a service is called without going through HTTP.
"""

from __future__ import annotations

import re

from email_validator import EmailNotValidError, validate_email as _validate_email

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 20
USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"

MESSAGE_MIN_LENGTH = 1
MESSAGE_MAX_LENGTH = 300

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128

VERIFY_CODE_MAX_LENGTH = 12


def validate_username(username: str) -> bool:
    """Return True if *username* is 2–20 characters of letters, digits or ``_``."""
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return False
    return bool(re.match(USERNAME_PATTERN, username))


def validate_email(email: str) -> bool:
    """Return True if *email* is a syntactically valid address.

    Deliverability (DNS) is not checked.
    """
    try:
        _validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_message_content(content: str) -> bool:
    """Return True if *content* is between 1 and 300 characters long."""
    return MESSAGE_MIN_LENGTH <= len(content) <= MESSAGE_MAX_LENGTH


def validate_verify_code(code: str, length: int = 6) -> bool:
    """Return True if *code* consists of exactly *length* decimal digits."""
    return len(code) == length and code.isdigit()
