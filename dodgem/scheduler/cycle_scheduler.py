"""Interval scheduler that drives the bump cycle forever.

The first cycle runs as soon as the scheduler starts. After every cycle,
whatever its outcome, the next run time is computed from the cycle's start
and published, then the scheduler waits one interval before the next cycle.

Wall-clock spacing between cycle starts is therefore interval + cycle
duration. With ``fixed_cadence`` the wait is shortened so the next cycle
starts at the published time instead (never a negative wait).
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional

from dodgem.pipeline.events import Event, EventBus, EventType, get_event_bus
from dodgem.pipeline.models import CycleReport, RunConfiguration
from dodgem.pipeline.runner import CycleRunner

logger = logging.getLogger(__name__)


class CycleScheduler:
    """Runs a CycleRunner on a fixed interval until stopped.

    ``run()`` only returns after ``request_stop()``. A stop request never
    interrupts a cycle in flight: it ends the inter-cycle wait early, or
    takes effect once the running cycle has reported.

    Example:
        scheduler = CycleScheduler(runner, run_config)
        task = asyncio.create_task(scheduler.run())
        ...
        scheduler.request_stop()
        await task
    """

    def __init__(
        self,
        runner: CycleRunner,
        run_config: RunConfiguration,
        event_bus: Optional[EventBus] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._runner = runner
        self._run_config = run_config
        self._event_bus = event_bus or get_event_bus()
        self._sleep = sleep
        self._clock = clock

        self._next_run: Optional[datetime] = None
        self._last_report: Optional[CycleReport] = None
        self._cycles_run = 0
        self._running = False
        self._waiting = False
        self._stop_requested = False
        self._stop_event = asyncio.Event()

    @property
    def interval(self) -> timedelta:
        return self._run_config.interval

    @property
    def next_run(self) -> Optional[datetime]:
        """When the next cycle is due; None until the first cycle finishes."""
        return self._next_run

    @property
    def last_report(self) -> Optional[CycleReport]:
        return self._last_report

    @property
    def cycles_run(self) -> int:
        return self._cycles_run

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_waiting(self) -> bool:
        """True while sleeping between cycles."""
        return self._waiting

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def request_stop(self) -> None:
        """Ask the scheduler to stop after the current cycle or wait."""
        if not self._stop_requested:
            logger.info("Scheduler stop requested")
        self._stop_requested = True
        self._stop_event.set()

    async def run(self) -> None:
        """Run cycles until a stop is requested.

        Raises:
            RuntimeError: If the scheduler is already running
        """
        if self._running:
            raise RuntimeError("Scheduler is already running")

        self._running = True
        logger.info(
            f"Scheduler started: {self._run_config.selection_mode.value} "
            f"every {self._run_config.interval_minutes} minutes"
        )

        try:
            while not self._stop_requested:
                started_at = self._clock()
                await self._run_cycle()

                self._next_run = started_at + self.interval
                if self._stop_requested:
                    break

                delay = self._delay_seconds()
                logger.info(f"Next cycle at {self._next_run:%H:%M:%S} (waiting {delay:.0f}s)")
                await self._emit_next_run(delay)
                await self._wait(delay)
        finally:
            self._running = False
            logger.info(f"Scheduler stopped after {self._cycles_run} cycles")

    async def _run_cycle(self) -> None:
        try:
            self._last_report = await self._runner.run()
        except Exception:
            # The next cycle is still scheduled
            logger.exception("Cycle aborted with an unexpected error")
        finally:
            self._cycles_run += 1

    def _delay_seconds(self) -> float:
        if self._run_config.fixed_cadence and self._next_run is not None:
            return max(0.0, (self._next_run - self._clock()).total_seconds())
        return self.interval.total_seconds()

    async def _wait(self, seconds: float) -> None:
        """Sleep between cycles; a stop request ends the wait early."""
        sleeper = asyncio.ensure_future(self._sleep(seconds))
        stopper = asyncio.ensure_future(self._stop_event.wait())
        self._waiting = True
        try:
            await asyncio.wait({sleeper, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            self._waiting = False
            for task in (sleeper, stopper):
                task.cancel()

    async def _emit_next_run(self, delay: float) -> None:
        await self._event_bus.publish(Event(
            event_type=EventType.NEXT_RUN_SCHEDULED,
            payload={
                "next_run": self._next_run,
                "wait_seconds": delay,
                "interval_minutes": self._run_config.interval_minutes,
                "cycles_run": self._cycles_run,
            },
            source="scheduler",
        ))
