"""
Environment-provided settings for the lead API (webhook, SMTP, notification list).

Values come from the process environment after `load_dotenv()`. Nothing here is
validated eagerly: a missing webhook URL is reported per request, and SMTP
problems only ever surface as discarded notification failures.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 465
DEFAULT_SMTP_SECURE = True
DEFAULT_SMTP_TIMEOUT_SECONDS = 30.0


class SmtpSettings(BaseModel):
    host: str = ""
    port: int = DEFAULT_SMTP_PORT
    secure: bool = DEFAULT_SMTP_SECURE
    user: str = ""
    password: str = ""
    from_address: str = ""
    timeout_seconds: float = Field(default=DEFAULT_SMTP_TIMEOUT_SECONDS, gt=0)

    @property
    def sender(self) -> str:
        return self.from_address or self.user


class Settings(BaseModel):
    webhook_url: str = ""
    site_url: str = ""
    webhook_timeout_seconds: Optional[float] = None
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    notify_emails: List[str] = Field(default_factory=list)
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])


def parse_recipient_list(raw: Optional[str]) -> List[str]:
    """Comma-separated addresses, trimmed, empty entries dropped."""
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() == "true"


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


def _env_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return None


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        webhook_url=os.getenv("APPS_SCRIPT_WEBAPP_URL", "").strip(),
        site_url=os.getenv("SITE_URL", ""),
        webhook_timeout_seconds=_env_float("WEBHOOK_TIMEOUT_SECONDS"),
        smtp=SmtpSettings(
            host=os.getenv("SMTP_HOST", "").strip(),
            port=_env_int("SMTP_PORT", DEFAULT_SMTP_PORT),
            secure=_env_bool("SMTP_SECURE", DEFAULT_SMTP_SECURE),
            user=os.getenv("SMTP_USER", ""),
            password=os.getenv("SMTP_PASS", ""),
            from_address=os.getenv("EMAIL_FROM", ""),
            timeout_seconds=_env_float("SMTP_TIMEOUT_SECONDS") or DEFAULT_SMTP_TIMEOUT_SECONDS,
        ),
        notify_emails=parse_recipient_list(os.getenv("NOTIFY_EMAILS")),
        cors_allow_origins=parse_recipient_list(os.getenv("CORS_ALLOW_ORIGINS")) or ["*"],
    )
