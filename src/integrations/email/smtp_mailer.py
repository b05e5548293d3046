"""
SMTP mail transport.

`secure=True` opens an implicit-TLS connection (SMTP_SSL, port 465 by default);
otherwise a plain connection is upgraded with STARTTLS when the server offers it.
Every `send` opens its own connection. The socket timeout is the settings'
`timeout_seconds`.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional, Sequence

from src.integrations.contracts.interfaces import MailTransport
from src.integrations.email.templates import RenderedEmail
from src.utils.settings import SmtpSettings

logger = logging.getLogger(__name__)


class MailConfigurationError(Exception):
    """SMTP settings are incomplete."""


class SmtpMailer(MailTransport):
    def __init__(self, settings: SmtpSettings):
        if not settings.host:
            raise MailConfigurationError("SMTP_HOST is not configured")
        if not settings.sender:
            raise MailConfigurationError("EMAIL_FROM or SMTP_USER must be configured")
        self.settings = settings

    @property
    def sender(self) -> str:
        return self.settings.sender

    def _connect(self) -> smtplib.SMTP:
        s = self.settings
        if s.secure:
            return smtplib.SMTP_SSL(s.host, s.port, timeout=s.timeout_seconds, context=ssl.create_default_context())
        conn = smtplib.SMTP(s.host, s.port, timeout=s.timeout_seconds)
        conn.ehlo()
        if conn.has_extn("starttls"):
            conn.starttls(context=ssl.create_default_context())
            conn.ehlo()
        return conn

    def send(self, message: EmailMessage) -> None:
        with self._connect() as conn:
            if self.settings.user:
                conn.login(self.settings.user, self.settings.password)
            conn.send_message(message)
        logger.info("Sent email %r to %s", message["Subject"], message["To"])


def build_message(
    rendered: RenderedEmail,
    sender: str,
    to: Sequence[str],
    reply_to: Optional[str] = None,
) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = rendered.subject
    if sender:
        msg["From"] = sender
    msg["To"] = ", ".join(to)
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.set_content(rendered.text)
    msg.add_alternative(rendered.html, subtype="html")
    return msg
