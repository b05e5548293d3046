"""Countdown + auto-redirect shown on the success screen.

One asyncio task drives both the per-second countdown and the final navigation,
so there is a single handle to cancel on teardown.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RedirectTimer:
    def __init__(
        self,
        navigate: Callable[[str], None],
        url: str,
        delay_seconds: int = 5,
        tick_seconds: float = 1.0,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        self._navigate_cb = navigate
        self.url = url
        self.delay_seconds = max(0, int(delay_seconds))
        self.tick_seconds = tick_seconds
        self.on_tick = on_tick
        self.remaining = self.delay_seconds
        self.navigated = False
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the countdown on the running loop. Calling it twice is a no-op."""
        if self._task is not None or self._cancelled:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while self.remaining > 0:
            await asyncio.sleep(self.tick_seconds)
            self.remaining = max(0, self.remaining - 1)
            if self.on_tick is not None:
                self.on_tick(self.remaining)
        self._navigate()

    def _navigate(self) -> None:
        if self.navigated:
            return
        self.navigated = True
        logger.info("Redirecting to %s", self.url)
        self._navigate_cb(self.url)

    def go_now(self) -> None:
        """Navigate immediately; the pending countdown can no longer fire."""
        self._navigate()
        self.cancel()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
