import json

import httpx
import pytest

from src.integrations.contracts.interfaces import SubmissionMeta
from src.integrations.policy.lead_submission_service import LeadSubmissionService
from src.integrations.policy.notification_service import NotificationDispatcher
from src.utils.settings import Settings

from tests.fakes import ExplodingTransport, FakeSink, RecordingTransport

META = SubmissionMeta(user_agent="pytest", ip="10.0.0.1", page="https://landing.spa.test")


def _body(lead=None, answers=None):
    lead = {"name": "Jane Doe", "email": "jane@x.com", "phone": "08012345678"} if lead is None else lead
    return json.dumps({"lead": lead, "answers": answers or {"concern": "Acne"}}).encode()


def _service(settings, landing_config, sink, transport=None):
    notifier = NotificationDispatcher(
        landing=landing_config,
        smtp=settings.smtp,
        notify_emails=settings.notify_emails,
        transport_factory=lambda: transport or RecordingTransport(),
    )
    return LeadSubmissionService(settings=settings, notifier=notifier, sink_factory=lambda url: sink)


@pytest.mark.asyncio
async def test_valid_submission_returns_ok(settings, landing_config):
    sink = FakeSink()
    transport = RecordingTransport()
    outcome = await _service(settings, landing_config, sink, transport).submit(_body(), META)

    assert outcome.status_code == 200
    assert outcome.result.to_dict() == {"ok": True}
    forwarded = sink.requests[0].to_payload()
    assert forwarded["lead"]["email"] == "jane@x.com"
    assert forwarded["answers"] == {"concern": "Acne"}
    assert forwarded["meta"] == {"userAgent": "pytest", "ip": "10.0.0.1", "page": "https://landing.spa.test"}
    assert len(transport.sent) == 2


@pytest.mark.asyncio
async def test_missing_phone_is_400(settings, landing_config):
    sink = FakeSink()
    body = _body(lead={"name": "Jane Doe", "email": "jane@x.com"})
    outcome = await _service(settings, landing_config, sink).submit(body, META)

    assert outcome.status_code == 400
    assert outcome.result.to_dict() == {"ok": False, "error": "Missing required fields"}
    assert sink.requests == []


@pytest.mark.asyncio
async def test_missing_lead_object_is_400(settings, landing_config):
    outcome = await _service(settings, landing_config, FakeSink()).submit(b"null", META)
    assert outcome.status_code == 400


@pytest.mark.asyncio
async def test_missing_webhook_url_is_500(landing_config):
    sink = FakeSink()
    outcome = await _service(Settings(webhook_url=""), landing_config, sink).submit(_body(), META)

    assert outcome.status_code == 500
    assert outcome.result.to_dict() == {"ok": False, "error": "Missing APPS_SCRIPT_WEBAPP_URL"}
    assert sink.requests == []


@pytest.mark.asyncio
async def test_webhook_ok_false_is_502_and_no_email(settings, landing_config):
    sink = FakeSink(data={"ok": False, "error": "quota exceeded"})
    transport = RecordingTransport()
    outcome = await _service(settings, landing_config, sink, transport).submit(_body(), META)

    assert outcome.status_code == 502
    assert outcome.result.to_dict() == {"ok": False, "error": "quota exceeded"}
    assert transport.sent == []


@pytest.mark.asyncio
async def test_webhook_error_status_without_body_uses_default_message(settings, landing_config):
    sink = FakeSink(status_code=503, data={})
    outcome = await _service(settings, landing_config, sink).submit(_body(), META)

    assert outcome.status_code == 502
    assert outcome.result.error == "Sheet write failed"


@pytest.mark.asyncio
async def test_webhook_unparseable_body_is_treated_as_success(settings, landing_config):
    # A 2xx with a body that is not JSON parses to {} and is accepted.
    # Leniency kept on purpose; flagged here so a change is deliberate.
    sink = FakeSink(status_code=200, data={})
    outcome = await _service(settings, landing_config, sink).submit(_body(), META)
    assert outcome.status_code == 200


@pytest.mark.asyncio
async def test_webhook_network_error_is_500(settings, landing_config):
    sink = FakeSink(exc=httpx.ConnectError("connection refused"))
    outcome = await _service(settings, landing_config, sink).submit(_body(), META)

    assert outcome.status_code == 500
    assert outcome.result.ok is False
    assert "connection refused" in outcome.result.error


@pytest.mark.asyncio
async def test_invalid_json_body_is_500(settings, landing_config):
    outcome = await _service(settings, landing_config, FakeSink()).submit(b"{not json", META)
    assert outcome.status_code == 500
    assert outcome.result.ok is False


@pytest.mark.asyncio
async def test_mail_transport_failures_never_change_outcome(settings, landing_config):
    transport = ExplodingTransport()
    outcome = await _service(settings, landing_config, FakeSink(), transport).submit(_body(), META)

    assert outcome.status_code == 200
    assert outcome.result.to_dict() == {"ok": True}
    assert transport.attempts == 2


@pytest.mark.asyncio
async def test_dispatcher_crash_is_contained(settings, landing_config):
    class CrashingDispatcher:
        def dispatch(self, *args, **kwargs):
            raise RuntimeError("template blew up")

    service = LeadSubmissionService(settings=settings, notifier=CrashingDispatcher(), sink_factory=lambda url: FakeSink())
    outcome = await service.submit(_body(), META)
    assert outcome.status_code == 200


@pytest.mark.asyncio
async def test_client_meta_is_ignored(settings, landing_config):
    sink = FakeSink()
    payload = json.loads(_body())
    payload["meta"] = {"ip": "6.6.6.6", "userAgent": "spoofed"}
    outcome = await _service(settings, landing_config, sink).submit(payload, META)

    assert outcome.status_code == 200
    assert sink.requests[0].meta == META


@pytest.mark.asyncio
async def test_non_mapping_answers_forwarded_as_empty(settings, landing_config):
    sink = FakeSink()
    payload = {"lead": {"name": "Jane Doe", "email": "jane@x.com", "phone": "08012345678"}, "answers": ["x"]}
    await _service(settings, landing_config, sink).submit(payload, META)
    assert sink.requests[0].answers == {}