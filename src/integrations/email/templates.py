"""Email bodies for the lead confirmation and the internal new-lead alert.

Each template renders a subject plus plain-text and HTML bodies. Interpolated
values are HTML-escaped in the HTML rendering only.
"""

from __future__ import annotations

import html as html_lib
from dataclasses import dataclass
from datetime import datetime
from typing import List, Mapping, Sequence, Tuple

from src.integrations.contracts.interfaces import LeadContact
from src.utils.config_loader import BrandConfig, OfferConfig, QuestionConfig

MISSING_ANSWER = "-"
NAME_FALLBACK = "there"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    text: str
    html: str


def _e(value: str) -> str:
    return html_lib.escape(value or "")


def render_confirmation(lead: LeadContact, brand: BrandConfig, offer: OfferConfig) -> RenderedEmail:
    name = lead.name.strip() or NAME_FALLBACK
    subject = f"Your {brand.name} {offer.discount_percent}% Offer"

    signature = brand.name + (f", {brand.tagline}" if brand.tagline else "")
    text_lines = [
        f"Hi {name},",
        "",
        f"Thanks for your interest in {brand.name}. Your {offer.discount_percent}% discount is locked in.",
        "",
        f"Use the discount code: {offer.discount_code}",
        "",
        f"- {signature}",
    ]
    if brand.website_url:
        text_lines.append(brand.website_url)

    link = ""
    if brand.website_url:
        link = f'<br/>\n<a href="{_e(brand.website_url)}">{_e(brand.website_url)}</a>'
    body_html = (
        f"<p>Hi {_e(name)},</p>\n"
        f"<p>Thanks for your interest in <strong>{_e(brand.name)}</strong>. "
        f"Your <strong>{offer.discount_percent}% discount</strong> is locked in.</p>\n"
        f"<p>Use the discount code: <b>{_e(offer.discount_code)}</b>.</p>\n"
        f"<p>- {_e(signature)}{link}</p>"
    )
    return RenderedEmail(subject=subject, text="\n".join(text_lines), html=body_html)


def answer_rows(answers: Mapping[str, str], questions: Sequence[QuestionConfig]) -> List[Tuple[str, str]]:
    """(label, value) for every configured question, `-` where unanswered."""
    rows = []
    for q in questions:
        value = answers.get(q.id)
        rows.append((q.label, value if isinstance(value, str) and value else MISSING_ANSWER))
    return rows


def render_internal_alert(
    lead: LeadContact,
    answers: Mapping[str, str],
    questions: Sequence[QuestionConfig],
    brand: BrandConfig,
    submitted_at: datetime,
) -> RenderedEmail:
    subject = f"New lead: {lead.name.strip() or lead.email.strip()} ({brand.name})"
    timestamp = submitted_at.isoformat(timespec="seconds")
    contact = [("Name", lead.name), ("Email", lead.email), ("Phone", lead.phone)]
    rows = answer_rows(answers, questions)

    text_lines = [f"New lead captured on the {brand.name} landing page.", ""]
    text_lines += [f"{label}: {value or MISSING_ANSWER}" for label, value in contact]
    text_lines.append("")
    text_lines += [f"{label}: {value}" for label, value in rows]
    text_lines += ["", f"Submitted at: {timestamp}", "", "Reply to this email to contact the lead directly."]

    table = "\n".join(
        f"<tr><th align=\"left\">{_e(label)}</th><td>{_e(value or MISSING_ANSWER)}</td></tr>"
        for label, value in contact + rows
    )
    body_html = (
        f"<p>New lead captured on the <strong>{_e(brand.name)}</strong> landing page.</p>\n"
        f"<table>\n{table}\n</table>\n"
        f"<p>Submitted at: {_e(timestamp)}</p>\n"
        "<p>Reply to this email to contact the lead directly.</p>"
    )
    return RenderedEmail(subject=subject, text="\n".join(text_lines), html=body_html)
