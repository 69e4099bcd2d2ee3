from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from campus_chat.config import Settings

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Send plain-text mail through an SMTP relay (e.g. SendGrid)."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        *,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def _build(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def _send_sync(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            if self._use_tls:
                server.starttls()
            if self._username and self._password:
                server.login(self._username, self._password)
            server.send_message(msg)

    async def send(self, to: str, subject: str, body: str) -> None:
        msg = self._build(to, subject, body)
        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(self._send_sync, msg)
        logger.debug("Mail '%s' sent to %s", subject, to)


class LoggingMailer:
    """Fallback used when no SMTP relay is configured: logs instead of sending."""

    async def send(self, to: str, subject: str, body: str) -> None:
        logger.info("E-mail not sent (no SMTP relay configured) to=%s subject=%r", to, subject)
        logger.debug("E-mail body:\n%s", body)


def build_mailer(settings: Settings) -> SmtpMailer | LoggingMailer:
    if not settings.SMTP_HOST:
        return LoggingMailer()
    return SmtpMailer(
        settings.SMTP_HOST,
        settings.SMTP_PORT,
        settings.MAIL_FROM,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
        use_tls=settings.SMTP_USE_TLS,
        timeout=settings.SMTP_TIMEOUT,
    )
