"""
Random code generators — pure, side-effect-free functions.

All generators use the cryptographically secure ``secrets`` module.
"""

from __future__ import annotations

import secrets
import string


def generate_verify_code(length: int = 6) -> str:
    """Generate a uniformly random numeric verification code.

    Args:
        length: Number of digits (default 6).

    Returns:
        String of random decimal digits, leading zeros preserved.
    """
    return "".join(secrets.choice(string.digits) for _ in range(length))
