"""
Concierge session - drives the wizard for one visitor.

Holds the current `WizardState`, applies actions through `WizardMachine`, runs the
single in-flight lead submission and owns the success-screen redirect timer.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from src.concierge.redirect_timer import RedirectTimer
from src.concierge.wizard import (
    Action,
    SubmitFailed,
    SubmitRequested,
    SubmitSucceeded,
    WizardMachine,
    WizardState,
)
from src.integrations.clients.real_http.lead_api import LeadApiClient, SubmissionNetworkError
from src.utils.config_loader import LandingConfig

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Sorry, we couldn't save your details. Please try again."
NETWORK_ERROR_MESSAGE = "Network error. Please try again."


class ConciergeSession:
    def __init__(
        self,
        config: LandingConfig,
        client: LeadApiClient,
        alert: Callable[[str], None],
        navigate: Callable[[str], None],
        tick_seconds: float = 1.0,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        self.config = config
        self.machine = WizardMachine(config.questions)
        self.client = client
        self.alert = alert
        self.navigate = navigate
        self.tick_seconds = tick_seconds
        self.on_tick = on_tick
        self.state: WizardState = self.machine.initial_state()
        self.redirect_timer: Optional[RedirectTimer] = None

    @property
    def progress(self) -> int:
        return self.machine.progress(self.state)

    def dispatch(self, action: Action) -> bool:
        """Apply one action. Returns False when the current state rejected it."""
        new_state = self.machine.transition(self.state, action)
        accepted = new_state is not self.state
        self.state = new_state
        return accepted

    async def submit(self) -> bool:
        """Submit the contact form. Returns True once the lead is confirmed saved."""
        if not self.dispatch(SubmitRequested()):
            return False

        lead = self.state.lead
        answers = self.state.answers_snapshot()
        try:
            result = await self.client.submit(lead, answers)
        except SubmissionNetworkError as e:
            logger.error(f"Lead submission network error: {e}")
            self.dispatch(SubmitFailed(error=str(e)))
            self.alert(NETWORK_ERROR_MESSAGE)
            return False

        if not result.ok:
            self.dispatch(SubmitFailed(error=result.error))
            self.alert(SAVE_FAILED_MESSAGE)
            return False

        self.dispatch(SubmitSucceeded())
        self._start_redirect()
        return True

    def _start_redirect(self) -> None:
        self.redirect_timer = RedirectTimer(
            navigate=self.navigate,
            url=self.config.redirect_url,
            delay_seconds=self.config.redirect_delay_seconds,
            tick_seconds=self.tick_seconds,
            on_tick=self.on_tick,
        )
        self.redirect_timer.start()

    def go_now(self) -> None:
        if self.redirect_timer is not None:
            self.redirect_timer.go_now()

    def close(self) -> None:
        """Tear down; cancels the pending redirect if one is scheduled."""
        if self.redirect_timer is not None:
            self.redirect_timer.cancel()
