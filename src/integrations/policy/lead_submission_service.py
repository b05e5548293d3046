"""
Lead submission service - validates a lead, stores it through the sheet webhook
and fires the best-effort notifications.

Status codes:
- 200 `{ok: true}` once the webhook confirmed the write
- 400 missing `lead.name` / `lead.email` / `lead.phone`
- 500 webhook URL not configured, or any unexpected exception
- 502 webhook answered non-2xx or `ok: false`

`submit` never raises. Notification results are computed and discarded; they can
never change the outcome.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union

from src.concierge.validation import has_required_lead_fields
from src.error_handler import ErrorHandler
from src.integrations.clients.real_http.apps_script_webhook import AppsScriptWebhookClient
from src.integrations.contracts.interfaces import (
    LeadContact,
    LeadSinkClient,
    SubmissionMeta,
    SubmissionOutcome,
    SubmissionRequest,
    SubmissionResult,
)
from src.integrations.policy.notification_service import NotificationDispatcher
from src.utils.settings import Settings

logger = logging.getLogger(__name__)

MISSING_FIELDS_ERROR = "Missing required fields"
MISSING_WEBHOOK_ERROR = "Missing APPS_SCRIPT_WEBAPP_URL"
SHEET_WRITE_FAILED_ERROR = "Sheet write failed"


class LeadSubmissionError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class LeadValidationError(LeadSubmissionError):
    status_code = 400


class ConfigurationError(LeadSubmissionError):
    status_code = 500


class UpstreamRejection(LeadSubmissionError):
    status_code = 502


SinkFactory = Callable[[str], LeadSinkClient]


class LeadSubmissionService:
    def __init__(
        self,
        settings: Settings,
        notifier: Optional[NotificationDispatcher] = None,
        sink_factory: Optional[SinkFactory] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.settings = settings
        self.notifier = notifier
        self._sink_factory = sink_factory or (
            lambda url: AppsScriptWebhookClient(url, timeout_seconds=settings.webhook_timeout_seconds)
        )
        self.error_handler = error_handler or ErrorHandler()

    async def submit(self, body: Union[bytes, str, Mapping[str, Any], None], meta: SubmissionMeta) -> SubmissionOutcome:
        try:
            payload = self._parse_body(body)
            if not has_required_lead_fields(payload):
                raise LeadValidationError(MISSING_FIELDS_ERROR)

            if not self.settings.webhook_url:
                raise ConfigurationError(MISSING_WEBHOOK_ERROR)

            answers = payload.get("answers")
            request = SubmissionRequest(
                lead=LeadContact.from_payload(payload["lead"]),
                answers=dict(answers) if isinstance(answers, Mapping) else {},
                meta=meta,
            )

            sink = self._sink_factory(self.settings.webhook_url)
            response = await sink.forward(request)
            if not response.is_success or response.data.get("ok") is False:
                raise UpstreamRejection(response.data.get("error") or SHEET_WRITE_FAILED_ERROR)

            try:
                await self._notify(request)
            except Exception as e:
                logger.warning("Lead notifications failed (non-fatal): %s", e)

            logger.info("Lead stored")
            return SubmissionOutcome(status_code=200, result=SubmissionResult(ok=True))
        except LeadSubmissionError as e:
            logger.warning("Lead submission rejected (%s): %s", e.status_code, e.message)
            return SubmissionOutcome(status_code=e.status_code, result=SubmissionResult(ok=False, error=str(e.message)))
        except Exception as e:
            return self.error_handler.handle_exception(e, context={"stage": "lead_submission"})

    @staticmethod
    def _parse_body(body: Union[bytes, str, Mapping[str, Any], None]) -> Mapping[str, Any]:
        if isinstance(body, (bytes, str)):
            body = json.loads(body)
        return body if isinstance(body, Mapping) else {}

    async def _notify(self, request: SubmissionRequest) -> None:
        if self.notifier is None:
            return
        report = await asyncio.to_thread(
            self.notifier.dispatch, request.lead, request.answers, datetime.now(timezone.utc)
        )
        logger.debug("Notification report: %s", report)
