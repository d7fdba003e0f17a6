"""EmailProvider protocol — services depend on this, not the concrete implementation."""

from typing import Protocol


class EmailProvider(Protocol):
    async def send_verification_email(
        self, email: str, username: str, verify_code: str
    ) -> bool:
        """Deliver *verify_code* to *email*. Returns False on any failure, never raises."""
        ...
