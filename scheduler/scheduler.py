"""Periodic notification generation with an on-demand trigger."""

import asyncio

import structlog

from notifications.engine import NotificationEngine
from scheduler.jobs import NOTIFICATION_POLL_INTERVAL

log = structlog.get_logger(__name__)


class GenerationScheduler:
    """Run ``engine.generate`` now and then every ``interval`` seconds until stopped."""

    def __init__(
        self,
        engine: NotificationEngine,
        interval: float = NOTIFICATION_POLL_INTERVAL,
    ) -> None:
        self.engine = engine
        self.interval = interval
        self._task: asyncio.Task[None] | None = None
        self._wake = asyncio.Event()

    def start(self) -> None:
        """Start the periodic loop. Idempotent while running."""
        if self.is_running():
            return
        self._task = asyncio.create_task(self._loop(), name="notification-generation")
        log.info("scheduler_started", interval=self.interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to wind down."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        log.info("scheduler_stopped")

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self) -> None:
        """Request a cycle now (e.g. after a mutation elsewhere in the app)."""
        self._wake.set()

    async def generate_now(self) -> bool:
        """Run a cycle inline; coalesced if one is already in flight."""
        return await self.engine.generate()

    async def _loop(self) -> None:
        while True:
            try:
                await self.engine.generate()
            except Exception as e:
                log.error("generation_cycle_error", error=str(e))

            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
            self._wake.clear()
