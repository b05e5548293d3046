"""
Lead API client used by the wizard.

Posts `{lead, answers}` to the lead endpoint and interprets the `{ok, error}`
envelope. Transport failures are raised as `SubmissionNetworkError` so the
wizard can tell them apart from a server that answered `ok: false`.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import httpx

from src.integrations.clients.real_http.apps_script_webhook import parse_json_object
from src.integrations.contracts.interfaces import LeadContact, SubmissionResult

logger = logging.getLogger(__name__)


class SubmissionNetworkError(Exception):
    """The lead endpoint could not be reached."""


class LeadApiClient:
    def __init__(
        self,
        base_url: str,
        path: str = "/api/lead",
        timeout_seconds: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def submit(self, lead: LeadContact, answers: Mapping[str, str]) -> SubmissionResult:
        payload = {"lead": lead.to_dict(), "answers": dict(answers)}
        url = f"{self.base_url}{self.path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except httpx.RequestError as e:
            logger.error(f"Lead submission request failed: {e}")
            raise SubmissionNetworkError(str(e)) from e

        data = parse_json_object(response)
        if not response.is_success or data.get("ok") is False:
            error = data.get("error") or f"HTTP {response.status_code}"
            logger.error("Lead save failed: %s", error)
            return SubmissionResult(ok=False, error=str(error))
        return SubmissionResult(ok=True)

