"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- The Apps Script web app that writes each lead to the spreadsheet
- The SMTP server used for lead confirmations and internal alerts
- This service's own lead endpoint, as called by the wizard

Key rule:
- Wizard and API code MUST NOT call external systems directly.
- They go through clients under src/integrations/clients and services under
  src/integrations/policy.

Switching implementations:
- Real clients are wired in ONE place (src/api/main.py); tests inject fakes.
"""

from .contracts.interfaces import (
    DispatchReport,
    LeadContact,
    NotificationChannel,
    NotificationOutcome,
    NotificationStatus,
    SubmissionMeta,
    SubmissionOutcome,
    SubmissionRequest,
    SubmissionResult,
    WebhookResponse,
)

__all__ = [
    "DispatchReport", "LeadContact", "NotificationChannel", "NotificationOutcome",
    "NotificationStatus", "SubmissionMeta", "SubmissionOutcome", "SubmissionRequest",
    "SubmissionResult", "WebhookResponse",
]
