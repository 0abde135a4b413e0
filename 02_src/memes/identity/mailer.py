"""Outgoing mail used for password reset codes."""

import asyncio
import os
import smtplib
from email.message import EmailMessage
from typing import Protocol

from ..logging_config import context, get_logger

logger = get_logger(__name__)


class IMailer(Protocol):
    """Delivers a plain-text email."""

    async def send(self, to_email: str, subject: str, body: str) -> None:
        ...


class LogMailer:
    """Mailer for development: records the mail instead of sending it."""

    def __init__(self):
        self.outbox: list[tuple[str, str, str]] = []

    async def send(self, to_email: str, subject: str, body: str) -> None:
        self.outbox.append((to_email, subject, body))
        logger.info("Mail queued for %s", to_email, extra=context(subject=subject))


class SMTPMailer:
    """Sends mail over SMTP with STARTTLS."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        sender: str | None = None,
    ):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender or username or "no-reply@memes.local"

    async def send(self, to_email: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self._sender
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(body)

        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(self._deliver, message)
        logger.info("Mail sent to %s", to_email)

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=10) as smtp:
            smtp.starttls()
            if self._username and self._password:
                smtp.login(self._username, self._password)
            smtp.send_message(message)


def mailer_from_env() -> IMailer:
    """SMTPMailer when SMTP_HOST is set, LogMailer otherwise."""
    host = os.getenv("SMTP_HOST")
    if not host:
        return LogMailer()
    return SMTPMailer(
        host=host,
        port=int(os.getenv("SMTP_PORT", "587")),
        username=os.getenv("SMTP_USER"),
        password=os.getenv("SMTP_PASSWORD"),
        sender=os.getenv("SMTP_SENDER"),
    )
