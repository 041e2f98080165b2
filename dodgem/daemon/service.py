"""Long-running bump service.

This module wires the bump components together and runs the scheduler:
- Service lifecycle management (start/stop)
- Signal handling: the first SIGINT/SIGTERM asks for a graceful stop, a
  second one cancels the running cycle
"""

import asyncio
import logging
import signal
from typing import Any, Dict, Optional

from rich.console import Console

from dodgem.browser.session import BrowserSessionOptions, PlaywrightBrowserSession
from dodgem.cli.presenter import ConsolePresenter
from dodgem.config import DodgemConfig
from dodgem.garage import GarageSite
from dodgem.pipeline.discoverer import Discoverer, SessionFactory
from dodgem.pipeline.events import EventBus, get_event_bus
from dodgem.pipeline.executor import ActionExecutor
from dodgem.pipeline.models import RunConfiguration
from dodgem.pipeline.runner import CycleRunner
from dodgem.scheduler.cycle_scheduler import CycleScheduler

logger = logging.getLogger(__name__)


class DodgemDaemon:
    """Runs bump cycles on an interval until shut down.

    Attributes:
        _config: Dodgem configuration
        _run_config: Selection mode, interval and credentials for this run
        _scheduler: Cycle scheduler, once started
        _task: Task running the scheduler loop

    Example:
        daemon = DodgemDaemon(config, run_config)

        await daemon.start()
        await daemon.run_until_shutdown()
        await daemon.stop()
    """

    def __init__(
        self,
        config: DodgemConfig,
        run_config: RunConfiguration,
        headless: Optional[bool] = None,
        event_bus: Optional[EventBus] = None,
        session_factory: Optional[SessionFactory] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the daemon service.

        Args:
            config: Dodgem configuration
            run_config: Settings for this run
            headless: Override the configured browser headless setting
            event_bus: Bus for progress events (defaults to the global bus)
            session_factory: Opens one browser per cycle (defaults to Playwright)
            console: Console the presenter writes to
        """
        self._config = config
        self._run_config = run_config
        self._headless = headless
        self._event_bus = event_bus or get_event_bus()
        self._session_factory = session_factory
        self._presenter = ConsolePresenter(console)
        self._scheduler: Optional[CycleScheduler] = None
        self._task: Optional["asyncio.Task[None]"] = None
        self._running = False
        self._shutdown_requests = 0

    def _build_scheduler(self) -> CycleScheduler:
        site = GarageSite(base_url=self._config.garage.base_url)

        session_factory = self._session_factory
        if session_factory is None:
            options = BrowserSessionOptions.from_config(self._config.browser, headless=self._headless)
            session_factory = lambda: PlaywrightBrowserSession(options)  # noqa: E731

        discoverer = Discoverer(
            self._run_config.credentials,
            session_factory,
            site=site,
            event_bus=self._event_bus,
        )
        executor = ActionExecutor(site=site, cooldown_seconds=self._run_config.cooldown_seconds)
        runner = CycleRunner(
            discoverer,
            executor,
            self._run_config.selection_mode,
            event_bus=self._event_bus,
        )
        return CycleScheduler(runner, self._run_config, event_bus=self._event_bus)

    async def start(self) -> None:
        """Build the components and start the scheduler loop.

        Raises:
            RuntimeError: If the daemon is already running
        """
        if self._running:
            raise RuntimeError("Daemon is already running")

        logger.info("Starting Dodgem...")
        self._presenter.attach(self._event_bus)
        self._scheduler = self._build_scheduler()
        self._task = asyncio.create_task(self._scheduler.run(), name="dodgem-scheduler")
        self._running = True
        logger.info("Dodgem started")

    async def run_until_shutdown(self) -> None:
        """Block until the scheduler stops, gracefully or by cancellation."""
        if self._task is None:
            return

        try:
            await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info("Scheduler cancelled")

    def request_shutdown(self) -> None:
        """Request shutdown.

        The first request lets the current cycle finish; any further request
        cancels it.
        """
        self._shutdown_requests += 1

        if self._scheduler is None or self._task is None or self._task.done():
            return

        if self._shutdown_requests == 1:
            logger.info("Shutdown requested, finishing the current cycle")
            self._scheduler.request_stop()
        else:
            logger.info("Second shutdown request, cancelling now")
            self._task.cancel()

    async def stop(self) -> None:
        """Stop the scheduler if it is still running and detach the presenter."""
        logger.info("Stopping Dodgem...")

        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self._presenter.detach()
        self._running = False
        logger.info("Dodgem stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def scheduler(self) -> Optional[CycleScheduler]:
        """The cycle scheduler, or None if not started."""
        return self._scheduler

    @property
    def shutdown_requests(self) -> int:
        return self._shutdown_requests


async def run_daemon(
    config: DodgemConfig,
    run_config: RunConfiguration,
    options: Optional[Dict[str, Any]] = None,
) -> None:
    """Run Dodgem with signal handling until shut down.

    Args:
        config: Dodgem configuration
        run_config: Settings for this run
        options: Daemon options including:
            - headless: Override the configured headless setting
            - console: Console for progress output

    Example:
        await run_daemon(config, run_config, {"headless": False})
    """
    options = options or {}
    daemon = DodgemDaemon(
        config,
        run_config,
        headless=options.get("headless"),
        console=options.get("console"),
    )

    loop = asyncio.get_running_loop()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info(f"Received signal {sig.name}")
        daemon.request_shutdown()

    installed = []
    previous_handlers = {}
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, lambda s=sig: handle_signal(s))
            installed.append(sig)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            previous_handlers[sig] = signal.signal(
                sig,
                lambda signum, frame: loop.call_soon_threadsafe(handle_signal, signal.Signals(signum)),
            )

    try:
        await daemon.start()
        await daemon.run_until_shutdown()
    finally:
        await daemon.stop()
        for sig in installed:
            loop.remove_signal_handler(sig)
        for sig, previous in previous_handlers.items():
            signal.signal(sig, previous if previous is not None else signal.SIG_DFL)
