from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from email.message import EmailMessage
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class NotificationStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


class NotificationChannel(str, Enum):
    CONFIRMATION = "confirmation"
    INTERNAL_ALERT = "internal_alert"


# question id -> selected option
Answers = Dict[str, str]


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class LeadContact:
    name: str = ""
    email: str = ""
    phone: str = ""

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "LeadContact":
        payload = payload if isinstance(payload, Mapping) else {}
        return cls(
            name=_text(payload.get("name")),
            email=_text(payload.get("email")),
            phone=_text(payload.get("phone")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "email": self.email, "phone": self.phone}


@dataclass(frozen=True)
class SubmissionMeta:
    """Request metadata. Always derived server side, never read from the client body."""

    user_agent: str = ""
    ip: str = ""
    page: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"userAgent": self.user_agent, "ip": self.ip, "page": self.page}


@dataclass(frozen=True)
class SubmissionRequest:
    lead: LeadContact
    answers: Answers = field(default_factory=dict)
    meta: SubmissionMeta = field(default_factory=SubmissionMeta)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "lead": self.lead.to_dict(),
            "answers": dict(self.answers),
            "meta": self.meta.to_dict(),
        }


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"ok": self.ok}
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class SubmissionOutcome:
    """A `SubmissionResult` paired with the HTTP status it should be served with."""

    status_code: int
    result: SubmissionResult


@dataclass
class NotificationOutcome:
    channel: NotificationChannel
    status: NotificationStatus
    recipients: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class DispatchReport:
    confirmation: NotificationOutcome
    internal_alert: NotificationOutcome

    @property
    def all_sent(self) -> bool:
        return all(o.status == NotificationStatus.SENT for o in (self.confirmation, self.internal_alert))


# ---------------------------------------------------------------------------
# Client interfaces
# ---------------------------------------------------------------------------

class LeadSinkClient(ABC):
    """Persistence webhook that durably stores a lead."""

    @abstractmethod
    async def forward(self, request: SubmissionRequest) -> "WebhookResponse":
        """POST the submission once and return the raw status plus parsed body."""


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class MailTransport(ABC):
    @abstractmethod
    def send(self, message: EmailMessage) -> None:
        """Deliver one message or raise."""
