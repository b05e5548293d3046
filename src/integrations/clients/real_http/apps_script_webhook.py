"""
Apps Script web-app webhook client (spreadsheet sink, source of truth for leads).

One POST per submission, no retries. The response body is parsed leniently: a
body that is not a JSON object becomes `{}` rather than an error, and the caller
decides what a missing `ok` means. Network errors propagate as `httpx` errors.

Timeout: httpx's default (5 s) unless `timeout_seconds` is given.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from src.integrations.contracts.interfaces import LeadSinkClient, SubmissionRequest, WebhookResponse

logger = logging.getLogger(__name__)


class AppsScriptWebhookClient(LeadSinkClient):
    def __init__(
        self,
        url: str,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = httpx.Timeout(timeout_seconds) if timeout_seconds else httpx.Timeout(5.0)
        self._transport = transport

    async def forward(self, request: SubmissionRequest) -> WebhookResponse:
        logger.info("Forwarding lead to sheet webhook")
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport, follow_redirects=True) as client:
            response = await client.post(url=self.url, json=request.to_payload())
        data = parse_json_object(response)
        logger.info(f"Sheet webhook responded: status={response.status_code} ok={data.get('ok')}")
        return WebhookResponse(status_code=response.status_code, data=data)


def parse_json_object(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
