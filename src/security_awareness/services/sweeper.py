"""Periodic eviction of idle sessions."""

import asyncio
import contextlib
import logging

from security_awareness.services.sessions import SessionService

logger = logging.getLogger(__name__)


class IdleSessionSweeper:
    """Runs the idle-session sweep on a fixed interval in a background task."""

    def __init__(self, session_service: SessionService, interval_seconds: float):
        self.session_service = session_service
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the sweep loop; a no-op if it is already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop())
        logger.info(
            "Idle session sweeper started",
            extra={"interval_seconds": self.interval_seconds},
        )

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to exit."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Idle session sweeper stopped")

    def run_once(self) -> list[str]:
        """Run a single sweep immediately."""
        return self.session_service.sweep_idle()

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception:
                logger.exception("Idle session sweep failed")
