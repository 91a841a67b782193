"""Out-of-band delivery of password reset links over SMTP."""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage

logger = logging.getLogger(__name__)

SENDER_NAME = "Employee Attendance System"


class DeliveryError(Exception):
    """Raised when a message could not be handed to the mail server."""


@dataclass(frozen=True)
class SmtpSettings:
    host: str = "smtp.gmail.com"
    port: int = 587
    user: str = ""
    password: str = ""
    timeout: int = 10
    use_tls: bool = True


class SmtpMailer:
    def __init__(self, settings: SmtpSettings):
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.user.strip() and self._settings.password.strip())

    def _build_message(self, *, to: str, name: str, reset_url: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = "Password Reset Request - Employee Attendance System"
        msg["From"] = f"{SENDER_NAME} <{self._settings.user}>"
        msg["To"] = to
        msg.set_content(
            f"Hello {name},\n\n"
            "We received a request to reset the password for your account.\n"
            f"Open the link below within one hour to choose a new password:\n\n{reset_url}\n\n"
            "If you did not request this, you can ignore this email.\n"
        )
        return msg

    def send_password_reset(self, *, to: str, name: str, reset_url: str) -> None:
        if not self.is_configured:
            raise DeliveryError("Email service is not configured")

        msg = self._build_message(to=to, name=name, reset_url=reset_url)
        s = self._settings
        try:
            with smtplib.SMTP(s.host, s.port, timeout=s.timeout) as smtp:
                if s.use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                smtp.login(s.user, s.password)
                smtp.send_message(msg)
        except smtplib.SMTPAuthenticationError as exc:
            logger.error("SMTP authentication failed for %s", s.user)
            raise DeliveryError("Email authentication failed") from exc
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Sending password reset email failed: %s", exc)
            raise DeliveryError("Email delivery failed") from exc
        logger.info("Password reset email sent to %s", to)
