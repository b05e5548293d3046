"""Fake collaborators shared across tests."""

from typing import List

from src.integrations.contracts.interfaces import LeadSinkClient, MailTransport, SubmissionRequest, WebhookResponse


class RecordingTransport(MailTransport):
    """Mail transport that keeps every message instead of sending it."""

    sender = "concierge@spa.test"

    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(message)


class ExplodingTransport(MailTransport):
    sender = "concierge@spa.test"

    def __init__(self):
        self.attempts = 0

    def send(self, message):
        self.attempts += 1
        raise ConnectionRefusedError("smtp down")


class FakeSink(LeadSinkClient):
    def __init__(self, status_code: int = 200, data=None, exc: Exception = None):
        self.status_code = status_code
        self.data = {"ok": True} if data is None else data
        self.exc = exc
        self.requests: List[SubmissionRequest] = []

    async def forward(self, request):
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return WebhookResponse(status_code=self.status_code, data=self.data)
