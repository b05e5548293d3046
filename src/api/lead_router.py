from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.integrations.contracts.interfaces import SubmissionMeta
from src.integrations.policy.lead_submission_service import LeadSubmissionService
from src.utils.config_loader import LandingConfig

router = APIRouter()


# Will be set by main.py after import
submission_service: Optional[LeadSubmissionService] = None
landing_config: Optional[LandingConfig] = None


def request_meta(request: Request, site_url: str) -> SubmissionMeta:
    """Build submission metadata from headers; whatever the client put in the body is ignored."""
    return SubmissionMeta(
        user_agent=request.headers.get("user-agent", ""),
        ip=request.headers.get("x-forwarded-for", ""),
        page=site_url or "",
    )


@router.post("/lead", tags=["Leads"])
async def submit_lead(request: Request):
    """Store a lead (`{lead, answers}`) and fire the follow-up emails."""
    body = await request.body()
    meta = request_meta(request, submission_service.settings.site_url)
    outcome = await submission_service.submit(body, meta)
    return JSONResponse(status_code=outcome.status_code, content=outcome.result.to_dict())


@router.get("/landing-config", tags=["Leads"])
async def get_landing_config():
    """Brand, offer copy, redirect and questions for rendering the wizard."""
    return landing_config.public_view()
