"""Verification email sender.

Transport settings are captured once in a ``MailConfig`` at start-up and
handed to the mailer; nothing here reads the environment per call.
"""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from accounts.utils.config import Settings


logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Email Verification"


@dataclass(frozen=True)
class MailConfig:
    host: str
    port: int
    sender: str
    base_url: str
    user: str | None = None
    password: str | None = None
    starttls: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailConfig":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_from,
            base_url=settings.verification_base_url,
            user=settings.smtp_user,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
        )


class VerificationMailer:
    """Sends the fixed-template verification email, one attempt per call."""

    def __init__(self, config: MailConfig) -> None:
        self.config = config

    def verification_link(self, verification_token: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/auth/verify/{verification_token}"

    def build_message(self, email: str, verification_token: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.sender
        message["To"] = email
        message["Subject"] = VERIFICATION_SUBJECT
        message.set_content(
            f"Click the following link to verify your email: {self.verification_link(verification_token)}"
        )
        return message

    def send_verification_email(self, email: str, verification_token: str) -> dict:
        """Send the email and return the recipients the server refused.

        An empty dict means the server accepted the message for every
        recipient. Transport errors are logged and re-raised.
        """
        message = self.build_message(email, verification_token)
        try:
            with smtplib.SMTP(self.config.host, self.config.port) as server:
                if self.config.starttls:
                    server.starttls()
                if self.config.user and self.config.password:
                    server.login(self.config.user, self.config.password)
                refused = server.send_message(message)
        except smtplib.SMTPException:
            logger.exception("SMTP error sending verification email to %s", email)
            raise
        except OSError:
            logger.exception("Could not reach SMTP server %s:%s", self.config.host, self.config.port)
            raise

        logger.info("Verification email sent to %s", email)
        return refused
