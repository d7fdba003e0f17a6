"""Resend implementation of EmailProvider.

Sends the verification code through Resend's HTTP API. Delivery failures
are logged and reported as ``False``; this provider never raises to the
service layer.
"""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger, redact_email

log = get_logger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)


class ResendEmailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        app_url: str = "http://localhost:3000",
        code_ttl_seconds: int = 3600,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._app_url = app_url
        self._code_ttl_seconds = code_ttl_seconds
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    async def _send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> bool:
        if not self._settings.resend_api_key:
            log.error("resend_send_failed", reason="api_key_not_configured")
            return False

        payload: dict = {
            "from": f"{self._settings.resend_from_name} <{self._settings.resend_from_email}>",
            "to": [to_email],
            "subject": subject,
            "html": html_body,
        }
        if text_body:
            payload["text"] = text_body

        headers = {
            "Authorization": f"Bearer {self._settings.resend_api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._http.post(
                _RESEND_API_URL, json=payload, headers=headers
            )
            if response.status_code in (200, 201, 202):
                log.info(
                    "email_sent_success",
                    to_email=redact_email(to_email),
                    subject=subject,
                )
                return True
            log.error(
                "email_sent_failed",
                to_email=redact_email(to_email),
                subject=subject,
                status_code=response.status_code,
                response=response.text[:200],
            )
            return False
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=redact_email(to_email),
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def send_verification_email(
        self, email: str, username: str, verify_code: str
    ) -> bool:
        subject = "ShadowSpeak | Verification code"
        expires_in_minutes = max(1, self._code_ttl_seconds // 60)
        template = self._jinja.get_template("verification.html")
        html_body = template.render(
            username=username,
            verify_code=verify_code,
            expires_in_minutes=expires_in_minutes,
            app_url=self._app_url,
        )
        text_body = (
            f"Hello {username},\n\n"
            f"Your verification code is: {verify_code}\n\n"
            f"This code expires in {expires_in_minutes} minutes.\n\n"
            f"If you did not request this code, please ignore this email."
        )
        return await self._send(email, subject, html_body, text_body)
