"""Out-of-band delivery of verification codes."""
from __future__ import annotations

import logging
import re

import resend
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.logging_config import anonymise

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@<>\s]+@[^@<>\s]+\.[^@<>\s]+$")
NAME_EMAIL_RE = re.compile(r"^.+ <[^@<>\s]+@[^@<>\s]+\.[^@<>\s]+>$")


class VerificationMailer:
    """Send verification codes through Resend.

    Delivery is fire-and-forget: failures are logged and swallowed so that a
    mail outage never undoes an issued challenge.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _from_field(self) -> str:
        # Accept a plain address or "Name <address>"; wrap plain addresses
        # with the application name.
        from_raw = (self.settings.RESEND_FROM_EMAIL or "").strip()
        if EMAIL_RE.match(from_raw):
            return f"{self.settings.APP_NAME} <{from_raw}>"
        if NAME_EMAIL_RE.match(from_raw):
            return from_raw
        logger.warning(
            "RESEND_FROM_EMAIL value '%s' is invalid; falling back to noreply",
            from_raw,
        )
        return f"{self.settings.APP_NAME} <noreply@example.com>"

    def _build_message(self, email: str, code: str) -> dict:
        ttl = self.settings.CODE_TTL_MINUTES
        return {
            "from": self._from_field(),
            "to": email,
            "subject": f"Your {self.settings.APP_NAME} verification code",
            "html": f"""
            <html>
                <body>
                    <h1>{self.settings.APP_NAME}</h1>
                    <p>Your verification code is:</p>
                    <p style="font-size:28px;letter-spacing:6px;font-family:monospace"><strong>{code}</strong></p>
                    <p>This code will expire in {ttl} minutes.</p>
                    <p>If you did not request this code, you can ignore this email.</p>
                </body>
            </html>
            """,
            "text": f"Your verification code is {code}. It expires in {ttl} minutes.",
        }

    def _deliver(self, message: dict) -> None:
        resend.api_key = self.settings.RESEND_API_KEY
        resend.Emails.send(message)

    async def send(self, email: str, code: str) -> bool:
        """Deliver ``code`` to ``email``; return whether delivery succeeded."""
        if not self.settings.RESEND_API_KEY:
            if self.settings.is_development:
                logger.info("[DEV MODE] Verification code for %s: %s", email, code)
            else:
                logger.warning(
                    "RESEND_API_KEY is not configured; verification email not sent [email_hash=%s]",
                    anonymise(email),
                )
            return False

        try:
            await run_in_threadpool(self._deliver, self._build_message(email, code))
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "Failed to send verification email [email_hash=%s]",
                anonymise(email),
                exc_info=exc,
            )
            return False
        return True


__all__ = ["VerificationMailer"]
