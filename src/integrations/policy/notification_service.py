"""
Notification dispatcher - best-effort emails after a lead is stored.

Two independent sends share one transport:
- confirmation to the lead (skipped when the lead has no email)
- internal alert to the notification list, Reply-To set to the lead

Every failure (missing SMTP settings, connection or auth errors, bad addresses) is
caught per send and recorded in the returned `DispatchReport`. `dispatch` never
raises; the caller is free to ignore the report.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional, Sequence

from src.integrations.contracts.interfaces import (
    DispatchReport,
    LeadContact,
    MailTransport,
    NotificationChannel,
    NotificationOutcome,
    NotificationStatus,
)
from src.integrations.email.smtp_mailer import SmtpMailer, build_message
from src.integrations.email.templates import render_confirmation, render_internal_alert
from src.utils.config_loader import LandingConfig
from src.utils.settings import SmtpSettings

logger = logging.getLogger(__name__)

TransportFactory = Callable[[], MailTransport]


class NotificationDispatcher:
    def __init__(
        self,
        landing: LandingConfig,
        smtp: SmtpSettings,
        notify_emails: Sequence[str] = (),
        transport_factory: Optional[TransportFactory] = None,
    ):
        self.landing = landing
        self.smtp = smtp
        self.notify_emails: List[str] = [e.strip() for e in notify_emails if e and e.strip()]
        self._transport_factory = transport_factory or (lambda: SmtpMailer(smtp))

    def dispatch(
        self,
        lead: LeadContact,
        answers: Mapping[str, str],
        submitted_at: Optional[datetime] = None,
    ) -> DispatchReport:
        submitted_at = submitted_at or datetime.now(timezone.utc)

        transport: Optional[MailTransport] = None
        transport_error: Optional[str] = None
        try:
            transport = self._transport_factory()
        except Exception as e:
            transport_error = str(e)
            logger.warning("Mail transport unavailable: %s", e)

        confirmation = self._send_confirmation(transport, transport_error, lead)
        internal_alert = self._send_internal_alert(transport, transport_error, lead, answers, submitted_at)
        return DispatchReport(confirmation=confirmation, internal_alert=internal_alert)

    def _sender(self, transport: MailTransport) -> str:
        return getattr(transport, "sender", "") or self.smtp.sender

    def _send_confirmation(
        self,
        transport: Optional[MailTransport],
        transport_error: Optional[str],
        lead: LeadContact,
    ) -> NotificationOutcome:
        channel = NotificationChannel.CONFIRMATION
        to = (lead.email or "").strip()
        if not to:
            return NotificationOutcome(channel, NotificationStatus.SKIPPED)
        if transport is None:
            return NotificationOutcome(channel, NotificationStatus.FAILED, [to], transport_error)

        try:
            rendered = render_confirmation(lead, self.landing.brand, self.landing.offer)
            transport.send(build_message(rendered, self._sender(transport), [to]))
        except Exception as e:
            logger.warning("Confirmation email failed (non-fatal): %s", e)
            return NotificationOutcome(channel, NotificationStatus.FAILED, [to], str(e))
        return NotificationOutcome(channel, NotificationStatus.SENT, [to])

    def _send_internal_alert(
        self,
        transport: Optional[MailTransport],
        transport_error: Optional[str],
        lead: LeadContact,
        answers: Mapping[str, str],
        submitted_at: datetime,
    ) -> NotificationOutcome:
        channel = NotificationChannel.INTERNAL_ALERT
        recipients = list(self.notify_emails)
        if not recipients:
            return NotificationOutcome(channel, NotificationStatus.SKIPPED)
        if transport is None:
            return NotificationOutcome(channel, NotificationStatus.FAILED, recipients, transport_error)

        try:
            rendered = render_internal_alert(lead, answers, self.landing.questions, self.landing.brand, submitted_at)
            reply_to = (lead.email or "").strip() or None
            transport.send(build_message(rendered, self._sender(transport), recipients, reply_to=reply_to))
        except Exception as e:
            logger.warning("Internal lead alert failed (non-fatal): %s", e)
            return NotificationOutcome(channel, NotificationStatus.FAILED, recipients, str(e))
        return NotificationOutcome(channel, NotificationStatus.SENT, recipients)
