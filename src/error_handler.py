"""Top-level error conversion for the lead submission pipeline."""
from typing import Any, Dict
import logging

from src.integrations.contracts.interfaces import SubmissionOutcome, SubmissionResult

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> SubmissionOutcome:
        logger.error("Unhandled exception in lead submission: %s (context=%s)", exc, context or {}, exc_info=True)
        return SubmissionOutcome(status_code=500, result=SubmissionResult(ok=False, error=str(exc)))
