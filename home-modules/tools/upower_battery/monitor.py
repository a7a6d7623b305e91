"""One-shot and continuous orchestration of refresh cycles.

In continuous mode the monitor alternates between running a refresh cycle
and waiting for the first of:

    - a UPower signal (any device changed, appeared or vanished)
    - the refresh timer, re-armed after every cycle
    - a shutdown request (SIGINT/SIGTERM)

A shutdown request that arrives during a cycle takes effect once the
cycle has finished.
"""

import asyncio
import logging
import sys
from enum import Enum
from typing import Optional, TextIO

from .cycle import refresh_cycle
from .duration import format_duration
from .errors import DeviceQueryFailed
from .models import MonitorConfig
from .upower import DeviceSource, NotificationStream

logger = logging.getLogger(__name__)


class WakeReason(Enum):
    """Why the monitor left its idle state. Lower values win ties."""
    SHUTDOWN = 0
    NOTIFICATION = 1
    TIMER = 2


class BatteryMonitor:
    """Runs refresh cycles once or until shut down."""

    def __init__(
        self,
        config: MonitorConfig,
        source: DeviceSource,
        output: Optional[TextIO] = None,
    ):
        """Initialize the monitor.

        Args:
            config: Monitor configuration
            source: Device source shared by every cycle
            output: Stream for status lines (default: stdout)
        """
        self.config = config
        self.source = source
        self.output = output or sys.stdout
        self.shutdown_event = asyncio.Event()
        self.cycles = 0

    def request_shutdown(self) -> None:
        """Stop before the next cycle. Safe to call from a signal handler."""
        logger.info("Shutdown requested")
        self.shutdown_event.set()

    async def run(self) -> None:
        """Run one cycle, then keep refreshing if listening.

        Raises:
            BatteryMonitorError: Any cycle failure, which ends the loop
        """
        await self._refresh()

        if not self.config.listen:
            return

        logger.info(
            f"Listening for UPower signals (refresh every {format_duration(self.config.refresh)})"
        )
        async with self.source.notifications() as stream:
            while not self.shutdown_event.is_set():
                reason = await self._wait_for_wake(stream)
                if reason is WakeReason.SHUTDOWN:
                    break

                logger.debug(f"Woken by {reason.name.lower()}")
                await self._refresh()

        logger.info(f"Monitor stopped after {self.cycles} cycle(s)")

    async def _refresh(self) -> None:
        await refresh_cycle(self.config, self.source, self.output)
        self.cycles += 1

    async def _wait_for_wake(self, stream: NotificationStream) -> WakeReason:
        """Race notification, timer and shutdown; return the winner.

        The losing waits are cancelled, so the timer always counts from
        the end of the previous cycle.
        """
        tasks = {
            asyncio.create_task(self.shutdown_event.wait()): WakeReason.SHUTDOWN,
            asyncio.create_task(self._next_notification(stream)): WakeReason.NOTIFICATION,
            asyncio.create_task(asyncio.sleep(self.config.refresh.total_seconds())): WakeReason.TIMER,
        }

        try:
            done, _ = await asyncio.wait(
                list(tasks), return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        winner = min(done, key=lambda task: tasks[task].value)
        # Re-raises notification stream failures
        winner.result()
        return tasks[winner]

    @staticmethod
    async def _next_notification(stream: NotificationStream) -> str:
        signal = await stream.next()
        if signal is None:
            raise DeviceQueryFailed("signal subscription", "notification stream closed")
        return signal
