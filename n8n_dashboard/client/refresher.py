"""
Auto-refresh timer for a dashboard session.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional

from n8n_dashboard.client.session import DashboardSession

logger = logging.getLogger(__name__)


class RefreshInterval(str, Enum):
    MANUAL = "manual"
    TEN_SECONDS = "10s"
    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"

    @property
    def seconds(self) -> Optional[int]:
        return REFRESH_INTERVAL_SECONDS[self]


REFRESH_INTERVAL_SECONDS = {
    RefreshInterval.MANUAL: None,
    RefreshInterval.TEN_SECONDS: 10,
    RefreshInterval.ONE_MINUTE: 60,
    RefreshInterval.FIVE_MINUTES: 300,
}


class AutoRefresher:
    """Re-runs session.refresh() on the chosen interval. Must be used inside a running event loop."""

    def __init__(self, session: DashboardSession, interval: RefreshInterval = RefreshInterval.MANUAL):
        self.session = session
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _loop(self, seconds: int):
        while True:
            await asyncio.sleep(seconds)
            try:
                await self.session.refresh()
            except Exception as e:
                logger.error(f"Auto-refresh failed: {e}")

    def start(self):
        if self.running:
            logger.warning("Auto-refresh already running")
            return
        seconds = self.interval.seconds
        if not seconds:
            return
        self._task = asyncio.create_task(self._loop(seconds))
        logger.info(f"Auto-refresh started: every {self.interval.value}")

    def stop(self):
        if self._task:
            self._task.cancel()
            self._task = None
            logger.info("Auto-refresh stopped")

    async def aclose(self):
        """Stop the timer and wait until an in-flight refresh has been cancelled."""
        task = self._task
        self.stop()
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    def set_interval(self, interval: RefreshInterval):
        """Change the period. The timer restarts so the next refresh is a full period away."""
        self.stop()
        self.interval = interval
        self.start()
