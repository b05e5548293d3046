"""Lead contact validation shared by the wizard and the submission pipeline.

The predicates (`name_valid`, `email_valid`, `phone_valid`, `lead_valid`) are pure
and never raise; they gate the contact form. The email check is a format sanity
check only (`x@y.z` shape) and accepts plenty of addresses an RFC parser would
reject. That is an accepted product decision, keep it loose.

`lead_field_errors` produces the structured `field_errors` mapping used for
form feedback.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional, Union

from src.integrations.contracts.interfaces import LeadContact

MIN_NAME_LENGTH = 2
MIN_PHONE_LENGTH = 7

_EMAIL_RE = re.compile(r".+@.+\..+")

LeadLike = Union[LeadContact, Mapping[str, Any]]


def _as_str(v: Any) -> str:
    return v if isinstance(v, str) else ""


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def name_valid(name: Any) -> bool:
    return len(_strip(name)) >= MIN_NAME_LENGTH


def email_valid(email: Any) -> bool:
    value = _as_str(email)
    if not value.strip():
        return False
    return _EMAIL_RE.search(value) is not None


def phone_valid(phone: Any) -> bool:
    return len(_strip(phone)) >= MIN_PHONE_LENGTH


def _fields(lead: Optional[LeadLike]) -> Dict[str, Any]:
    if isinstance(lead, LeadContact):
        return lead.to_dict()
    if isinstance(lead, Mapping):
        return dict(lead)
    return {}


def lead_valid(lead: Optional[LeadLike]) -> bool:
    f = _fields(lead)
    return name_valid(f.get("name")) and email_valid(f.get("email")) and phone_valid(f.get("phone"))


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def lead_field_errors(lead: Optional[LeadLike]) -> Dict[str, str]:
    """Per-field messages for the contact form; empty when `lead_valid` holds."""
    f = _fields(lead)
    errors: Dict[str, str] = {}
    if not name_valid(f.get("name")):
        add_error(errors, "name", f"Name must be at least {MIN_NAME_LENGTH} characters")
    if not _strip(f.get("email")):
        add_error(errors, "email", "Email is required")
    elif not email_valid(f.get("email")):
        add_error(errors, "email", "Email is not valid")
    if not phone_valid(f.get("phone")):
        add_error(errors, "phone", f"Phone number must be at least {MIN_PHONE_LENGTH} characters")
    return errors


def has_required_lead_fields(payload: Any) -> bool:
    """Server-side presence check: `lead.name`, `lead.email` and `lead.phone` are truthy."""
    if not isinstance(payload, Mapping):
        return False
    lead = payload.get("lead")
    if not isinstance(lead, Mapping):
        return False
    return all(bool(lead.get(k)) for k in ("name", "email", "phone"))

