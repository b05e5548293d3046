"""
FastAPI application - Main entry point

  uvicorn src.api.main:app --host 127.0.0.1 --port 8000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import src.api.lead_router as lead_module
from src.api.lead_router import router as lead_router
from src.integrations.policy.lead_submission_service import LeadSubmissionService
from src.integrations.policy.notification_service import NotificationDispatcher
from src.utils.config_loader import load_landing_config
from src.utils.settings import load_settings

# Setup logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

settings = load_settings()
landing_config = load_landing_config()

# Initialize FastAPI app
app = FastAPI(
    title=f"{landing_config.brand.name} Lead API",
    description="Conversational landing page lead capture: sheet webhook + email notifications",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

if not settings.webhook_url:
    logger.warning("APPS_SCRIPT_WEBAPP_URL is not set; lead submissions will fail with 500")

notifier = NotificationDispatcher(
    landing=landing_config,
    smtp=settings.smtp,
    notify_emails=settings.notify_emails,
)

lead_module.submission_service = LeadSubmissionService(settings=settings, notifier=notifier)
lead_module.landing_config = landing_config

app.include_router(lead_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "webhook_configured": bool(settings.webhook_url),
        "smtp_configured": bool(settings.smtp.host),
        "timestamp": datetime.now().isoformat(),
    }
